from unittest.mock import patch, MagicMock

import pytest
import requests

from portfolio_client import GENERIC_FAILURE_MESSAGE, PortfolioGenerationFailed, generate_portfolio_content


def make_response(status_code=200, payload=None, text=""):
    res = MagicMock()
    res.ok = 200 <= status_code < 300
    res.status_code = status_code
    res.text = text
    res.json.return_value = payload
    return res


@patch("portfolio_client.requests.post")
def test_returns_document_with_certifications_default(mock_post, sample_portfolio):
    del sample_portfolio["certifications"]
    mock_post.return_value = make_response(payload=sample_portfolio)

    data = generate_portfolio_content("Jane Doe", base_url="http://api.test/")

    assert data["certifications"] == []
    args, kwargs = mock_post.call_args
    assert args[0] == "http://api.test/api/generate"
    assert kwargs["json"] == {"resumeText": "Jane Doe"}


@pytest.mark.parametrize("response", [
    make_response(500, text='{"error": "Server missing GEMINI_API_KEY"}'),
    make_response(payload={"workExperience": []}),
])
@patch("portfolio_client.requests.post")
def test_failures_collapse_into_generic_message(mock_post, response):
    mock_post.return_value = response

    with pytest.raises(PortfolioGenerationFailed) as exc:
        generate_portfolio_content("Jane Doe")
    assert str(exc.value) == GENERIC_FAILURE_MESSAGE


@patch("portfolio_client.requests.post")
def test_network_error_is_wrapped_and_logged(mock_post, caplog):
    mock_post.side_effect = requests.ConnectionError("refused")

    with pytest.raises(PortfolioGenerationFailed) as exc:
        generate_portfolio_content("Jane Doe")

    assert isinstance(exc.value.__cause__, requests.ConnectionError)
    assert "refused" in caplog.text
