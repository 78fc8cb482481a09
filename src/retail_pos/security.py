import logging
from datetime import datetime, timedelta
from collections import defaultdict, deque

class SecurityManager:
    def __init__(self, rate_limit_requests=60, rate_limit_window=timedelta(minutes=1)):
        self.logger = logging.getLogger(__name__)
        self.rate_limits = defaultdict(deque)

        # Security settings
        self.rate_limit_requests = rate_limit_requests  # requests per window
        self.rate_limit_window = rate_limit_window

    def check_rate_limit(self, ip_address, now=None):
        """Check if IP is within rate limits"""
        now = now or datetime.now()
        cutoff = now - self.rate_limit_window
        requests = self.rate_limits[ip_address]

        # Clean old requests
        while requests and requests[0] < cutoff:
            requests.popleft()

        if len(requests) >= self.rate_limit_requests:
            self.logger.warning(f"Rate limit exceeded for IP {ip_address}")
            return False

        requests.append(now)
        return True

    def reset(self):
        self.rate_limits.clear()

    def get_security_headers(self):
        """Get security headers for HTTP responses"""
        return {
            'X-Content-Type-Options': 'nosniff',
            'X-Frame-Options': 'DENY',
            'Strict-Transport-Security': 'max-age=31536000; includeSubDomains',
            'Referrer-Policy': 'strict-origin-when-cross-origin'
        }

def sanitize_input(input_string):
    """Strip markup and quote characters from free-text input"""
    if not isinstance(input_string, str):
        return input_string

    sanitized = input_string.strip()
    for char in ['<', '>', '"', "'", ';']:
        sanitized = sanitized.replace(char, '')

    return sanitized
