import json

import pytest

from tfrun.contracts import Output
from tfrun.errors import OutputsUnavailableError
from tfrun.orchestration.outputs import OutputTransformer, to_caller_value
from tfrun.testkit.payloads import sample_outputs


def test_transform_json_encodes_non_string_values():
    result = OutputTransformer().transform(sample_outputs(), workspace_id="ws-1")

    assert result.values == {
        "foo": "example-output",
        "bar": "some-sensitive-output",
        "foobar": '["some","arr","val"]',
    }


def test_transform_marks_exactly_sensitive_outputs():
    result = OutputTransformer().transform(sample_outputs())

    assert result.sensitive_names == frozenset({"bar"})
    assert result.secret_values() == ["some-sensitive-output"]


def test_transform_rejects_empty_output_set():
    with pytest.raises(OutputsUnavailableError, match="workspace ws-1 has no available outputs"):
        OutputTransformer().transform((), workspace_id="ws-1")


def test_transform_renames_and_adds_static_outputs():
    outputs = (
        Output(name="ngrok_domain", type="string", sensitive=True, value="abc.ngrok.io"),
        Output(name="count", type="number", sensitive=False, value=3),
    )
    transformer = OutputTransformer(
        rename={"ngrok_domain": "tfe_hostname"},
        static_outputs={"tfe_user1": "tfe-provider-user1"},
    )

    result = transformer.transform(outputs)

    assert result.values == {
        "tfe_hostname": "abc.ngrok.io",
        "count": "3",
        "tfe_user1": "tfe-provider-user1",
    }
    assert result.sensitive_names == frozenset({"tfe_hostname"})


def test_static_output_replacing_sensitive_output_is_not_sensitive():
    outputs = (
        Output(name="password", type="string", sensitive=True, value="hunter2"),
        Output(name="user", type="string", sensitive=True, value="admin"),
    )
    transformer = OutputTransformer(static_outputs={"password": "redacted-upstream"})

    result = transformer.transform(outputs)

    assert result.values["password"] == "redacted-upstream"
    assert result.sensitive_names == frozenset({"user"})
    assert result.secret_values() == ["admin"]


@pytest.mark.parametrize(
    "value",
    [{"a": [1, 2]}, 1.5, True, None, ["x"]],
)
def test_to_caller_value_is_valid_json_for_non_strings(value):
    assert json.loads(to_caller_value(value)) == value
