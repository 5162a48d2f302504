import pytest

pytestmark = pytest.mark.unit


class TestSensitiveDataMasking:
    def test_password_masked(self):
        from config.settings import mask_sensitive_data

        event_dict = {"event": "test", "data": "password='s3cret123'"}
        result = mask_sensitive_data(None, None, event_dict)
        assert "s3cret123" not in result["data"]
        assert "***MASKED***" in result["data"]

    def test_token_masked(self):
        from config.settings import mask_sensitive_data

        event_dict = {"event": "test", "header": "token=abc123xyz"}
        result = mask_sensitive_data(None, None, event_dict)
        assert "abc123xyz" not in result["header"]
        assert "***MASKED***" in result["header"]

    def test_authorization_masked(self):
        from config.settings import mask_sensitive_data

        event_dict = {"event": "test", "header": "Authorization: Bearer.eyJhbGciOi"}
        result = mask_sensitive_data(None, None, event_dict)
        assert "eyJhbGciOi" not in result["header"]

    def test_email_local_part_masked(self):
        from config.settings import mask_sensitive_data

        event_dict = {"event": "customer.duplicate_email", "email": "ada@example.com"}
        result = mask_sensitive_data(None, None, event_dict)
        assert result["email"] == "***@example.com"

    def test_non_sensitive_data_unchanged(self):
        from config.settings import mask_sensitive_data

        event_dict = {"event": "customer.created", "customer_code": "C001"}
        result = mask_sensitive_data(None, None, event_dict)
        assert result["customer_code"] == "C001"
        assert result["event"] == "customer.created"

    def test_non_string_values_untouched(self):
        from config.settings import mask_sensitive_data

        event_dict = {"event": "customer.updated", "fields": ["email", "phone"]}
        result = mask_sensitive_data(None, None, event_dict)
        assert result["fields"] == ["email", "phone"]
