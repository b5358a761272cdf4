from signatureapp.config import Settings, get_settings, unescape_pem


class TestSettings:
    def test_defaults(self, monkeypatch):
        for name in ("CERTIFICATE_KEY", "PRIVATE_KEY", "SIGNATUREAPP_PORT", "SIGNATUREAPP_HOST"):
            monkeypatch.delenv(name, raising=False)
        s = Settings(_env_file=None)
        assert s.port == 3000
        assert s.host == "0.0.0.0"
        assert s.cors_origin_list == ["*"]
        assert s.max_upload_mb == 1000
        assert s.tsa_url is None
        assert s.certificate_key == ""

    def test_bare_credential_names(self, monkeypatch):
        monkeypatch.setenv("CERTIFICATE_KEY", "cert-text")
        monkeypatch.setenv("PRIVATE_KEY", "key-text")
        s = Settings(_env_file=None)
        assert s.certificate_key == "cert-text"
        assert s.private_key == "key-text"

    def test_prefixed_names(self, monkeypatch):
        monkeypatch.delenv("CERTIFICATE_KEY", raising=False)
        monkeypatch.setenv("SIGNATUREAPP_CERTIFICATE_KEY", "prefixed-cert")
        monkeypatch.setenv("SIGNATUREAPP_PORT", "8080")
        monkeypatch.setenv("SIGNATUREAPP_CORS_ORIGINS", "https://a.example, https://b.example,")
        s = Settings(_env_file=None)
        assert s.certificate_key == "prefixed-cert"
        assert s.port == 8080
        assert s.cors_origin_list == ["https://a.example", "https://b.example"]

    def test_env_file(self, tmp_path, monkeypatch):
        monkeypatch.delenv("PRIVATE_KEY", raising=False)
        env = tmp_path / ".env"
        env.write_text('PRIVATE_KEY="line1\\nline2"\nSIGNATUREAPP_LOG_LEVEL=DEBUG\n')
        s = Settings(_env_file=str(env))
        assert unescape_pem(s.private_key) == "line1\nline2"
        assert s.log_level == "DEBUG"


def test_unescape_pem():
    assert unescape_pem("-----BEGIN X-----\\nabc\\n-----END X-----") == "-----BEGIN X-----\nabc\n-----END X-----"
    assert unescape_pem("already\nreal") == "already\nreal"


def test_get_settings_is_cached():
    get_settings.cache_clear()
    try:
        assert get_settings() is get_settings()
    finally:
        get_settings.cache_clear()
