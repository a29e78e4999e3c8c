# testssl/cli.py
"""
Command line entry point.

  testssl --domain example.com [--dir ssl]

Writes rootCA.pem / rootCA.key and server.pem / server.key into --dir.
"""
import argparse
import os
import sys

from testssl.common.config import SubjectDefaults, default_output_dir
from testssl.common.errors import TestSSLError
from testssl.common.utils import normalize_domain
from testssl.crypto.pki import build_subject, issue_leaf, issue_root
from testssl.storage.files import prepare_dir, write_issued

ROOT_NAME = "rootCA"
SERVER_NAME = "server"


def generate_cert(domain: str, directory: str, defaults: SubjectDefaults = None):
    """
    Issue the root CA and the server certificate for `domain` and write
    them into `directory`. Returns the list of written paths.
    Nothing is written unless both certificates were issued.
    """
    hostname = normalize_domain(domain)
    if os.path.isdir(directory):
        print("Folder already exists")
    print(f"Using {directory} as folder for output")
    print(f"Using {hostname} as domain name")

    subject = build_subject(hostname, defaults or SubjectDefaults.from_env())
    root = issue_root(subject)
    server = issue_leaf(subject, root.cert, root.key)

    prepare_dir(directory)
    written = []
    for name, issued in ((ROOT_NAME, root), (SERVER_NAME, server)):
        for path in write_issued(directory, name, issued):
            print(f"Created file: {path}")
            written.append(path)
    return written


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="testssl",
        description="Generate a local root CA and a server certificate signed by it.",
    )
    parser.add_argument("--domain", default="", help="Domain for which you wish to generate SSL")
    parser.add_argument("--dir", default=default_output_dir(),
                        help="Directory where you want to generate SSL (default: %(default)s)")
    return parser


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if not args.domain:
        parser.print_usage(sys.stderr)
    try:
        generate_cert(args.domain, args.dir)
    except TestSSLError as e:
        print("Error:", e, file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
