"""
HTTP output for exported log lines.
Ships lines in newline-delimited batches to a collector endpoint.
"""

import requests
from typing import Dict, Any, Iterable, List
import logging

from ..errors import SinkError


class HttpLineSink:
    """Sink that POSTs exported lines to an HTTP endpoint."""

    def __init__(self, config: Dict[str, Any]):
        """
        Initialize HTTP sink.

        Args:
            config: output_http section of the processed configuration
        """
        self.config = config
        self.url = config.get('url')
        if not self.url:
            raise SinkError("HTTP sink requires a url")

        self.batch_size = config.get('batch_size', 500)
        self.timeout = config.get('timeout', 30)
        self.verify_ssl = config.get('verify_ssl', True)
        self.username = config.get('username')
        self.password = config.get('password')
        self.token = config.get('token')

        # Setup authentication
        self.auth = None
        self.headers = {'Content-Type': 'text/plain; charset=utf-8'}

        if self.token:
            self.headers['Authorization'] = f'Bearer {self.token}'
        elif self.username and self.password:
            self.auth = (self.username, self.password)

        self.lines_sent = 0

        # Setup logging
        self.logger = logging.getLogger(__name__)

    def write_lines(self, lines: Iterable[str]) -> int:
        """
        Send lines in batches of batch_size.

        Returns:
            Number of lines sent

        Raises:
            SinkError: If a batch cannot be delivered
        """
        batch: List[str] = []
        sent = 0

        for line in lines:
            batch.append(line)
            if len(batch) >= self.batch_size:
                sent += self._send_batch(batch)
                batch = []

        if batch:
            sent += self._send_batch(batch)

        self.lines_sent += sent
        return sent

    def _send_batch(self, batch: List[str]) -> int:
        body = '\n'.join(batch) + '\n'

        try:
            response = requests.post(
                self.url,
                data=body.encode('utf-8'),
                headers=self.headers,
                auth=self.auth,
                timeout=self.timeout,
                verify=self.verify_ssl
            )
        except requests.RequestException as e:
            raise SinkError(f"Error sending {len(batch)} lines to {self.url}: {e}") from e

        if not 200 <= response.status_code < 300:
            raise SinkError(f"HTTP sink request failed: {response.status_code} - {response.text}")

        self.logger.info(f"Successfully sent {len(batch)} lines to {self.url}")
        return len(batch)
