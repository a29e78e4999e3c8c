import os
import stat

from cryptography import x509

from testssl import cli
from testssl.crypto.pki import verify_key_pair, verify_signed_by

OUTPUT_FILES = ["rootCA.pem", "rootCA.key", "server.pem", "server.key"]


def _read(path):
    with open(path) as f:
        return f.read()


def test_generates_files(tmp_path, capsys):
    out = tmp_path / "ssl"
    assert cli.main(["--domain", "www.example.com", "--dir", str(out)]) == 0

    assert sorted(os.listdir(out)) == sorted(OUTPUT_FILES)
    root_pem, server_pem = _read(out / "rootCA.pem"), _read(out / "server.pem")
    verify_key_pair(root_pem, _read(out / "rootCA.key"))
    verify_key_pair(server_pem, _read(out / "server.key"))
    verify_signed_by(
        x509.load_pem_x509_certificate(server_pem.encode()),
        x509.load_pem_x509_certificate(root_pem.encode()),
    )

    printed = capsys.readouterr().out
    assert "Using example.com as domain name" in printed
    assert f"Using {out} as folder for output" in printed
    assert printed.count("Created file:") == 4


def test_key_files_private(tmp_path):
    assert cli.main(["--domain", "example", "--dir", str(tmp_path)]) == 0
    assert stat.S_IMODE(os.stat(tmp_path / "server.key").st_mode) == 0o600
    assert stat.S_IMODE(os.stat(tmp_path / "rootCA.key").st_mode) == 0o600


def test_existing_folder(tmp_path, capsys):
    assert cli.main(["--domain", "example.com", "--dir", str(tmp_path)]) == 0
    lines = capsys.readouterr().out.splitlines()
    assert lines[:3] == [
        "Folder already exists",
        f"Using {tmp_path} as folder for output",
        "Using example.com as domain name",
    ]


def test_bare_label(tmp_path):
    assert cli.main(["--domain", "example", "--dir", str(tmp_path)]) == 0
    cert = x509.load_pem_x509_certificate((tmp_path / "server.pem").read_bytes())
    san = cert.extensions.get_extension_for_class(x509.SubjectAlternativeName).value
    assert san.get_values_for_type(x509.DNSName) == ["example.test", "*.example.test"]


def test_empty_domain_fails_without_files(tmp_path, capsys):
    out = tmp_path / "ssl"
    assert cli.main(["--domain", "", "--dir", str(out)]) == 1
    assert not out.exists()
    assert "Missing domain name" in capsys.readouterr().err


def test_missing_domain_flag(tmp_path, capsys):
    out = tmp_path / "ssl"
    assert cli.main(["--dir", str(out)]) == 1
    assert not out.exists()
    assert "usage:" in capsys.readouterr().err


def test_output_dir_is_a_file(tmp_path, capsys):
    target = tmp_path / "taken"
    target.write_text("")
    assert cli.main(["--domain", "example.com", "--dir", str(target)]) == 1
    assert "not a directory" in capsys.readouterr().err


def test_subject_from_env(tmp_path, monkeypatch):
    monkeypatch.setenv("TESTSSL_ORGANIZATION", "Acme Inc.")
    assert cli.main(["--domain", "example.com", "--dir", str(tmp_path)]) == 0
    cert = x509.load_pem_x509_certificate((tmp_path / "rootCA.pem").read_bytes())
    org = cert.subject.get_attributes_for_oid(x509.NameOID.ORGANIZATION_NAME)[0].value
    assert org == "Acme Inc."


def test_new_folder_messages(tmp_path, capsys):
    out = tmp_path / "ssl"
    assert cli.main(["--domain", "example.com", "--dir", str(out)]) == 0
    printed = capsys.readouterr().out
    assert "Folder already exists" not in printed
    assert printed.index("as folder for output") < printed.index("as domain name")


def test_max_length_hostname(tmp_path, capsys):
    hostname = ".".join(["a" * 63] * 3 + ["b" * 61])
    assert len(hostname) == 253
    assert cli.main(["--domain", hostname, "--dir", str(tmp_path)]) == 0
    cert = x509.load_pem_x509_certificate((tmp_path / "server.pem").read_bytes())
    cn = cert.subject.get_attributes_for_oid(x509.NameOID.COMMON_NAME)[0].value
    assert cn == hostname
    assert f"Using {hostname} as domain name" in capsys.readouterr().out


def test_invalid_subject_env(tmp_path, monkeypatch, capsys):
    out = tmp_path / "ssl"
    monkeypatch.setenv("TESTSSL_COUNTRY", "USA")
    assert cli.main(["--domain", "example.com", "--dir", str(out)]) == 1
    assert not out.exists()
    assert capsys.readouterr().err.startswith("Error:")


def test_output_dir_from_env(tmp_path, monkeypatch, capsys):
    out = tmp_path / "from-env"
    monkeypatch.setenv("TESTSSL_DIR", str(out))
    assert cli.main(["--domain", "example.com"]) == 0
    assert sorted(os.listdir(out)) == sorted(OUTPUT_FILES)
