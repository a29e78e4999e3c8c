import pytest

from testssl.crypto.pki import build_subject, issue_leaf, issue_root


@pytest.fixture(scope="session")
def subject():
    return build_subject("example.com")


@pytest.fixture(scope="session")
def root(subject):
    return issue_root(subject)


@pytest.fixture(scope="session")
def leaf(subject, root):
    return issue_leaf(subject, root.cert, root.key)
