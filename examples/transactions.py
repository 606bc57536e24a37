import planetscale
import os

with planetscale.connect(
    os.getenv("PLANETSCALE_USERNAME"),
    os.getenv("PLANETSCALE_PASSWORD"),
) as client:

    client.execute("CREATE TABLE IF NOT EXISTS accounts (id int PRIMARY KEY, balance int)")
    client.execute("INSERT INTO accounts VALUES (1, 1000), (2, 500)")

    def transfer(tx):
        tx.execute("UPDATE accounts SET balance = balance - 100 WHERE id = 1")
        tx.execute("UPDATE accounts SET balance = balance + 100 WHERE id = 2")
        return tx.execute("SELECT id, balance FROM accounts ORDER BY id")

    # BEGIN and COMMIT run on a separate session; any error triggers ROLLBACK
    try:
        balances = client.transaction(transfer)
        print("Transaction committed successfully")
        print("Accounts:", balances.to_records())
    except planetscale.Error as e:
        print(f"Transaction rolled back due to error: {e}")
        raise

    # The same thing as a context manager
    with client.begin() as tx:
        tx.execute("UPDATE accounts SET balance = balance + 1 WHERE id = 1")
