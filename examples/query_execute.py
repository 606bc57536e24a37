import planetscale
import os

with planetscale.connect(
    os.getenv("PLANETSCALE_USERNAME"),
    os.getenv("PLANETSCALE_PASSWORD"),
) as client:

    result = client.execute("SELECT id, name FROM users LIMIT 10")

    for record in result.to_records():
        print(record)
