import planetscale
import os
import logging


logger = logging.getLogger("planetscale")
logger.setLevel(logging.DEBUG)
fh = logging.FileHandler("pslogs.log")
fh.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(process)d %(thread)d %(message)s"))
fh.setLevel(logging.DEBUG)
logger.addHandler(fh)

with planetscale.connect(
    os.getenv("PLANETSCALE_USERNAME"),
    os.getenv("PLANETSCALE_PASSWORD"),
    _socket_timeout=30,
) as client:

    client.boost(True)
    result = client.execute(
        "SELECT COUNT(*) AS total FROM users",
        cache_policy=planetscale.CachePolicy.ttl(60),
    )
    print(result.to_records())
