"""
Utilities for HTTP request handling and response processing.
Shared by the quote API client.
"""

import requests
import asyncio
import time
from typing import Dict, Any, Optional, Tuple
import urllib.parse

from loguru import logger


class APIError(Exception):
    """Exception raised for API errors."""
    
    def __init__(self, message: str, status_code: Optional[int] = None, response: Any = None):
        self.message = message
        self.status_code = status_code
        self.response = response
        super().__init__(self.message)


async def async_request(
    method: str,
    url: str,
    headers: Dict[str, str] = None,
    params: Dict[str, Any] = None,
    timeout: int = 10,
    retries: int = 3,
    backoff_factor: float = 0.5
) -> Dict[str, Any]:
    """
    Make an asynchronous HTTP request to an API.
    
    Args:
        method: HTTP method (GET, POST, etc.)
        url: URL to request
        headers: Optional headers
        params: Optional query parameters
        timeout: Request timeout in seconds
        retries: Number of attempts before giving up (4xx responses are not retried)
        backoff_factor: Backoff factor between attempts
        
    Returns:
        Parsed JSON response
        
    Raises:
        APIError: On request failure after retries
    """
    loop = asyncio.get_running_loop()
    
    def make_request():
        for attempt in range(retries):
            try:
                response = requests.request(
                    method=method,
                    url=url,
                    headers=headers,
                    params=params,
                    timeout=timeout
                )
                response.raise_for_status()
                return response.json()
                
            except requests.exceptions.RequestException as e:
                logger.warning(f"Request failed (attempt {attempt+1}/{retries}): {str(e)}")
                
                status_code = None
                if getattr(e, "response", None) is not None:
                    status_code = e.response.status_code
                client_error = status_code is not None and 400 <= status_code < 500

                if client_error or attempt == retries - 1:
                    error_response = None
                    
                    if getattr(e, "response", None) is not None:
                        try:
                            error_response = e.response.json()
                        except ValueError:
                            error_response = e.response.text
                    
                    raise APIError(
                        message=f"Request failed after {attempt+1} attempts: {str(e)}",
                        status_code=status_code,
                        response=error_response
                    )
                
                # Exponential backoff
                time.sleep(backoff_factor * (2 ** attempt))
    
    # Run the blocking request in the default thread pool
    try:
        return await loop.run_in_executor(None, make_request)
    except APIError:
        raise
    except Exception as e:
        raise APIError(f"Unexpected error during request: {str(e)}")


def build_url_with_params(base_url: str, endpoint: str, params: Dict[str, Any] = None) -> str:
    """
    Build a URL with properly encoded query parameters.
    
    Args:
        base_url: Base URL
        endpoint: API endpoint
        params: Query parameters
        
    Returns:
        Full URL with encoded parameters
    """
    # Ensure there's exactly one slash between base_url and endpoint
    if base_url.endswith('/') and endpoint.startswith('/'):
        endpoint = endpoint[1:]
    elif not base_url.endswith('/') and not endpoint.startswith('/'):
        endpoint = '/' + endpoint
    
    url = base_url + endpoint
    
    if params:
        filtered_params = {k: v for k, v in params.items() if v is not None}
        if filtered_params:
            query_string = urllib.parse.urlencode(filtered_params)
            url = f"{url}?{query_string}"
    
    return url


def process_response(
    response: Dict[str, Any],
    success_path: str = None,
    default_value: Any = None
) -> Tuple[bool, Any, Optional[str]]:
    """
    Process API response to extract data and errors consistently.
    
    Args:
        response: API response dictionary
        success_path: Dot-separated path to success data (e.g., "snapshot.price")
        default_value: Default value if success_path is not found
        
    Returns:
        Tuple of (success, data, error_message)
    """
    if response is None:
        return False, default_value, "No response received"
    
    if not isinstance(response, dict):
        return False, default_value, f"Unexpected response type: {type(response).__name__}"
    
    if 'error' in response:
        return False, default_value, str(response.get('error'))
    
    data = response
    if success_path:
        for part in success_path.split('.'):
            if isinstance(data, dict) and part in data:
                data = data[part]
            else:
                return False, default_value, f"Missing '{success_path}' in response"
    
    return True, data, None
