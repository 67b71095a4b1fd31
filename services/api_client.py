# -*- coding: utf-8 -*-
"""
Remote API Client - HTTP access to the hosted backend
=====================================================

Speaks the PostgREST-style table API (/rest/v1/<table>), the RPC endpoint
(/rest/v1/rpc/<function>) and the password-grant auth endpoints
(/auth/v1/...). Every request carries the public API key; requests made
on behalf of a signed-in user also carry the user's bearer token.
"""

import json
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import requests
import urllib3

from app.config import Config
from services.exceptions import ApiException, NetworkException
from utils.logger import get_logger

logger = get_logger(__name__)


@dataclass
class ApiConfig:
    """
    Connection settings for the backend.

    Unset values are loaded from Config, which reads the .env file.
    """
    base_url: str = None
    api_key: str = None
    timeout: int = None
    verify_ssl: bool = None

    def __post_init__(self):
        if self.base_url is None:
            self.base_url = Config.REMOTE_URL
        if self.api_key is None:
            self.api_key = Config.REMOTE_ANON_KEY
        if self.timeout is None:
            self.timeout = Config.REMOTE_TIMEOUT
        if self.verify_ssl is None:
            self.verify_ssl = Config.REMOTE_VERIFY_SSL


class RemoteApiClient:
    """
    HTTP client for the hosted backend.

    Usage:
        client = RemoteApiClient(ApiConfig())
        client.sign_in("user@system.local", "secret")
        rows = client.get_rows("families", {"camp_id": "eq.c1"})
    """

    def __init__(self, config: ApiConfig = None):
        self.config = config or ApiConfig()
        self.base_url = self.config.base_url.rstrip('/')
        self.access_token: Optional[str] = None
        if not self.config.verify_ssl:
            # Self-signed certificates in development deployments
            urllib3.disable_warnings(urllib3.exceptions.InsecureRequestWarning)

    # ==================== Authentication ====================

    def set_access_token(self, token: Optional[str]):
        """Use a user session token for subsequent requests (None reverts to the API key)."""
        self.access_token = token

    def sign_in(self, email: str, password: str) -> Dict[str, Any]:
        """Password grant; returns the token payload including the user object."""
        data = self._request(
            "POST", "/auth/v1/token",
            json_data={"email": email, "password": password},
            params={"grant_type": "password"},
            log_body=False,
        )
        self.access_token = data.get("access_token")
        logger.info(f"Signed in as {email}")
        return data

    def sign_out(self):
        if not self.access_token:
            return
        try:
            self._request("POST", "/auth/v1/logout")
        finally:
            self.access_token = None

    def get_user(self) -> Dict[str, Any]:
        """The user the current token belongs to; raises ApiException when the token is invalid."""
        return self._request("GET", "/auth/v1/user")

    def health_check(self) -> bool:
        """True when the backend answers at all, whatever the status code."""
        try:
            self._request("GET", "/rest/v1/", log_body=False)
        except ApiException:
            return True
        except NetworkException:
            return False
        return True

    # ==================== Tables ====================

    def get_rows(self, table: str, params: Dict[str, str],
                 range_header: Optional[str] = None) -> List[Dict[str, Any]]:
        headers = {"Range-Unit": "items", "Range": range_header} if range_header else None
        return self._request("GET", f"/rest/v1/{table}", params=params,
                             extra_headers=headers, log_body=False)

    def post_rows(self, table: str, rows: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        return self._request("POST", f"/rest/v1/{table}", json_data=rows,
                             extra_headers={"Prefer": "return=representation"})

    def patch_rows(self, table: str, params: Dict[str, str],
                   values: Dict[str, Any]) -> List[Dict[str, Any]]:
        return self._request("PATCH", f"/rest/v1/{table}", json_data=values, params=params,
                             extra_headers={"Prefer": "return=representation"})

    def delete_rows(self, table: str, params: Dict[str, str]) -> List[Dict[str, Any]]:
        return self._request("DELETE", f"/rest/v1/{table}", params=params,
                             extra_headers={"Prefer": "return=representation"})

    def count_rows(self, table: str, params: Dict[str, str]) -> int:
        response = self._request(
            "HEAD", f"/rest/v1/{table}", params=params,
            extra_headers={"Prefer": "count=exact"}, raw=True,
        )
        # Content-Range: 0-24/25  or  */0
        content_range = response.headers.get("Content-Range", "")
        total = content_range.rsplit("/", 1)[-1]
        return int(total) if total.isdigit() else 0

    def call_rpc(self, function: str, payload: Dict[str, Any]) -> Any:
        return self._request("POST", f"/rest/v1/rpc/{function}", json_data=payload)

    # ==================== Transport ====================

    def _headers(self, extra: Optional[Dict[str, str]] = None) -> Dict[str, str]:
        headers = {
            "apikey": self.config.api_key or "",
            "Authorization": f"Bearer {self.access_token or self.config.api_key or ''}",
            "Content-Type": "application/json",
            "Accept": "application/json",
        }
        if extra:
            headers.update(extra)
        return headers

    def _request(
        self,
        method: str,
        endpoint: str,
        json_data: Any = None,
        params: Optional[Dict] = None,
        extra_headers: Optional[Dict[str, str]] = None,
        log_body: bool = True,
        raw: bool = False,
    ) -> Any:
        """
        Perform an HTTP request with error mapping.

        HTTP error statuses raise ApiException; connection failures and
        timeouts raise NetworkException.
        """
        url = f"{self.base_url}{endpoint}"

        logger.info(f"[API REQ] {method} {endpoint}")
        if params:
            logger.debug(f"[API REQ] Params: {params}")
        if json_data is not None and log_body:
            logger.debug(f"[API REQ] Body: {json.dumps(json_data, ensure_ascii=False, default=str)[:1000]}")

        try:
            response = requests.request(
                method=method,
                url=url,
                json=json_data,
                params=params,
                headers=self._headers(extra_headers),
                timeout=self.config.timeout,
                verify=self.config.verify_ssl,
            )
            response.raise_for_status()

            logger.info(f"[API RES] {response.status_code} {endpoint}")
            if raw:
                return response

            result = None
            if response.text:
                result = response.json()
            if result and log_body:
                res_str = json.dumps(result, ensure_ascii=False, default=str)
                if len(res_str) > 1000:
                    logger.debug(f"[API RES] Body (truncated): {res_str[:1000]}...")
                else:
                    logger.debug(f"[API RES] Body: {res_str}")
            return result

        except requests.exceptions.HTTPError as e:
            status_code = e.response.status_code if e.response is not None else 0
            response_data = {}
            try:
                response_data = e.response.json() if e.response is not None else {}
            except ValueError:
                pass
            if not isinstance(response_data, dict):
                response_data = {"detail": response_data}
            message = (
                response_data.get("message")
                or response_data.get("msg")
                or response_data.get("error_description")
                or str(e)
            )
            logger.error(f"[API ERR] {status_code} {method} {endpoint} | Response: {response_data}")
            raise ApiException(
                message=message,
                status_code=status_code,
                response_data=response_data,
                original_error=e,
            )
        except (requests.exceptions.ConnectionError, requests.exceptions.Timeout) as e:
            logger.error(f"[API ERR] Network error: {method} {endpoint} - {e}")
            raise NetworkException(message=str(e), original_error=e)
        except requests.exceptions.RequestException as e:
            logger.error(f"[API ERR] Request failed: {method} {endpoint} - {e}")
            raise NetworkException(message=str(e), original_error=e)
