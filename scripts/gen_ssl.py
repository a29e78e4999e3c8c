# scripts/gen_ssl.py
"""
Generate a local root CA and a server certificate signed by it.
Usage: python scripts/gen_ssl.py --domain example.com [--dir ssl]
Produces:
  <dir>/rootCA.pem  <dir>/rootCA.key
  <dir>/server.pem  <dir>/server.key
"""
import os, sys
# Add project root to Python path
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from testssl.cli import main

if __name__ == "__main__":
    sys.exit(main())
