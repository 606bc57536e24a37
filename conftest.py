import os
import pytest


@pytest.fixture(scope="session")
def host():
    return os.getenv("PLANETSCALE_HOST")


@pytest.fixture(scope="session")
def username():
    return os.getenv("PLANETSCALE_USERNAME")


@pytest.fixture(scope="session")
def password():
    return os.getenv("PLANETSCALE_PASSWORD")


@pytest.fixture(scope="session")
def connection_details(host, username, password):
    return {
        "host": host,
        "username": username,
        "password": password,
    }
