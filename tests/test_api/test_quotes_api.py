import asyncio
from unittest.mock import MagicMock, patch

import pytest
import requests

from portfolio_tracker.api.quotes import AsyncQuoteAPI
from portfolio_tracker.api.request_utilities import (
    APIError,
    async_request,
    build_url_with_params,
    process_response,
)
from portfolio_tracker.errors import FetchError, QuoteNotFoundError


def _response(payload):
    response = MagicMock()
    response.json.return_value = payload
    response.raise_for_status.return_value = None
    return response


def test_quote_returns_snapshot_price():
    api = AsyncQuoteAPI(api_key="test_api_key")
    with patch("portfolio_tracker.api.request_utilities.requests.request") as request:
        request.return_value = _response({"snapshot": {"ticker": "AAPL", "price": 187.5}})
        quote = asyncio.run(api.quote(" aapl "))

    assert quote.ticker == "AAPL"
    assert quote.current_price == 187.5
    kwargs = request.call_args.kwargs
    assert kwargs["method"] == "GET"
    assert kwargs["url"] == "https://api.financialdatasets.ai/prices/snapshot?ticker=AAPL"
    assert kwargs["headers"]["X-API-KEY"] == "test_api_key"


def test_missing_price_raises_not_found():
    api = AsyncQuoteAPI(api_key="test_api_key")
    with patch("portfolio_tracker.api.request_utilities.requests.request") as request:
        request.return_value = _response({"error": "Ticker not found"})
        with pytest.raises(QuoteNotFoundError):
            asyncio.run(api.quote("ZZZZ"))


def test_network_error_raises_fetch_error_after_one_attempt():
    api = AsyncQuoteAPI(api_key="test_api_key")
    with patch("portfolio_tracker.api.request_utilities.requests.request") as request, \
            patch("portfolio_tracker.api.request_utilities.time.sleep"):
        request.side_effect = requests.exceptions.ConnectionError("connection refused")
        with pytest.raises(FetchError) as exc_info:
            asyncio.run(api.quote("AAPL"))

    assert request.call_count == 1
    assert exc_info.value.ticker == "AAPL"
    assert not isinstance(exc_info.value, QuoteNotFoundError)


def test_missing_api_key_raises_fetch_error(monkeypatch):
    monkeypatch.delenv("FINANCIAL_DATASETS_API_KEY", raising=False)
    api = AsyncQuoteAPI()

    with pytest.raises(FetchError):
        asyncio.run(api.quote("AAPL"))


def test_api_key_falls_back_to_environment(monkeypatch):
    monkeypatch.setenv("FINANCIAL_DATASETS_API_KEY", "env_key")
    assert AsyncQuoteAPI().default_headers["X-API-KEY"] == "env_key"


def test_build_url_with_params_joins_and_filters():
    assert build_url_with_params("https://x.io/", "/prices", {"a": 1, "b": None}) == "https://x.io/prices?a=1"
    assert build_url_with_params("https://x.io", "prices") == "https://x.io/prices"


def test_process_response_paths():
    assert process_response({"snapshot": {"price": 1}}, "snapshot.price") == (True, 1, None)
    ok, data, error = process_response({"other": 1}, "snapshot", default_value={})
    assert not ok and data == {} and "snapshot" in error
    assert process_response(None)[0] is False


def test_http_404_raises_not_found():
    api = AsyncQuoteAPI(api_key="test_api_key")
    not_found = MagicMock()
    not_found.status_code = 404
    not_found.json.return_value = {"error": "not found"}
    error = requests.exceptions.HTTPError("404 Client Error", response=not_found)

    with patch("portfolio_tracker.api.request_utilities.requests.request") as request, \
            patch("portfolio_tracker.api.request_utilities.time.sleep"):
        request.return_value.raise_for_status.side_effect = error
        with pytest.raises(QuoteNotFoundError):
            asyncio.run(api.quote("ZZZZ"))

    assert request.call_count == 1


def _http_error(status_code):
    response = MagicMock()
    response.status_code = status_code
    response.json.return_value = {"error": "failed"}
    return requests.exceptions.HTTPError(f"{status_code} Error", response=response)


def test_async_request_does_not_retry_client_errors():
    with patch("portfolio_tracker.api.request_utilities.requests.request") as request, \
            patch("portfolio_tracker.api.request_utilities.time.sleep") as sleep:
        request.return_value.raise_for_status.side_effect = _http_error(404)
        with pytest.raises(APIError) as exc_info:
            asyncio.run(async_request("GET", "https://x.io/prices", retries=3))

    assert exc_info.value.status_code == 404
    assert request.call_count == 1
    sleep.assert_not_called()


def test_async_request_retries_server_errors():
    with patch("portfolio_tracker.api.request_utilities.requests.request") as request, \
            patch("portfolio_tracker.api.request_utilities.time.sleep") as sleep:
        request.return_value.raise_for_status.side_effect = _http_error(503)
        with pytest.raises(APIError) as exc_info:
            asyncio.run(async_request("GET", "https://x.io/prices", retries=3))

    assert exc_info.value.status_code == 503
    assert request.call_count == 3
    assert sleep.call_count == 2
