"""
Base class for asynchronous API clients.
Provides standardized request handling and response processing.
"""

import asyncio
from abc import ABC
from functools import wraps
from typing import Dict, Any, Optional, Tuple
from loguru import logger

from .request_utilities import (
    async_request,
    APIError,
    build_url_with_params,
    process_response,
)


class AsyncBaseAPI(ABC):
    """
    Base class for asynchronous API clients with common functionality.
    """
    
    def __init__(self, base_url: str, api_key: Optional[str] = None):
        """
        Initialize the async API client.
        
        Args:
            base_url: Base URL for API requests
            api_key: Optional API key for authentication
        """
        self.base_url = base_url
        self.api_key = api_key
        self.default_headers = {}
        
        if api_key:
            self.default_headers["X-API-KEY"] = api_key
    
    async def request(
        self,
        method: str,
        endpoint: str,
        params: Dict[str, Any] = None,
        headers: Dict[str, Any] = None,
        timeout: int = 10,
        retries: int = 3
    ) -> Dict[str, Any]:
        """
        Make an asynchronous request to the API.
        
        Args:
            method: HTTP method (GET, POST, etc.)
            endpoint: API endpoint
            params: Query parameters
            headers: Additional headers
            timeout: Request timeout in seconds
            retries: Number of attempts on failure
            
        Returns:
            Response data as a dictionary
            
        Raises:
            APIError: On request failure
        """
        request_headers = self.default_headers.copy()
        if headers:
            request_headers.update(headers)
            
        url = build_url_with_params(self.base_url, endpoint, params)
        
        # Log the request (not including sensitive headers)
        logger.debug(f"API Request: {method} {endpoint}")
        
        try:
            loop = asyncio.get_running_loop()
            start_time = loop.time()
            response = await async_request(
                method=method,
                url=url,
                headers=request_headers,
                timeout=timeout,
                retries=retries
            )
            logger.debug(f"API Response received in {loop.time() - start_time:.2f}s")
            return response
            
        except APIError as e:
            logger.error(f"API Error: {e.message} (Status: {e.status_code})")
            raise APIError(
                message=f"Error in {method} request to {endpoint}: {e.message}",
                status_code=e.status_code,
                response=e.response
            )
    
    async def get(self, endpoint: str, params: Dict[str, Any] = None, **kwargs) -> Dict[str, Any]:
        """Make a GET request to the API."""
        return await self.request("GET", endpoint, params=params, **kwargs)
    
    async def process_response(
        self,
        response: Dict[str, Any],
        success_path: str = None,
        default_value: Any = None
    ) -> Tuple[bool, Any, Optional[str]]:
        """Extract (success, data, error_message) from an API response."""
        return process_response(
            response=response,
            success_path=success_path,
            default_value=default_value
        )


class ApiKeyRequiredError(Exception):
    """Exception raised when an API key is required but not provided."""
    pass


def require_api_key(func):
    """
    Decorator to ensure API key is set before calling a method.
    
    Raises:
        ApiKeyRequiredError: If API key is not set
    """
    @wraps(func)
    async def wrapper(self, *args, **kwargs):
        if not getattr(self, "api_key", None):
            raise ApiKeyRequiredError(f"API key is required for {func.__name__}")
        return await func(self, *args, **kwargs)
    return wrapper
