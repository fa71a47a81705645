from microorm.utils import REDACTED_VALUE, redact_params


def test_redact_params_masks_sensitive_values():
    params = ["Ada", "my password is hunter2", 42, None, b"secret", "Bearer abc"]
    assert redact_params(params) == ["Ada", REDACTED_VALUE, 42, None, REDACTED_VALUE, REDACTED_VALUE]


def test_redact_params_leaves_plain_values_alone():
    assert redact_params(("Grace", "Hopper", 3)) == ["Grace", "Hopper", 3]


def test_redact_params_does_not_descend_into_containers():
    nested = ("token=abc",)
    assert redact_params([nested]) == [nested]
