import logging
import time
from functools import wraps

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

# Configure logging
def setup_logging(level='INFO', log_file=None):
    """Setup logging configuration"""
    handlers = [logging.StreamHandler()]
    if log_file:
        handlers.append(logging.FileHandler(log_file, mode='a'))

    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        format=LOG_FORMAT,
        handlers=handlers
    )

    logger = logging.getLogger('retail_pos')
    return logger

# Performance monitoring decorator
def monitor_performance(func):
    """Decorator to monitor function performance"""
    logger = logging.getLogger(func.__module__)

    @wraps(func)
    def wrapper(*args, **kwargs):
        start_time = time.time()
        try:
            result = func(*args, **kwargs)
            execution_time = time.time() - start_time
            logger.debug(f"{func.__name__} executed in {execution_time:.4f} seconds")
            return result
        except Exception as e:
            execution_time = time.time() - start_time
            logger.error(f"{func.__name__} failed after {execution_time:.4f} seconds: {str(e)}")
            raise
    return wrapper

# API monitoring
class APIMonitor:
    def __init__(self, window=1000):
        self.request_count = 0
        self.error_count = 0
        self.response_times = []
        self.window = window
        self.start_time = time.time()
        self.logger = logging.getLogger(__name__)

    def log_request(self, method, endpoint, status_code, response_time):
        """Log API request"""
        self.request_count += 1
        self.response_times.append(response_time)

        if status_code >= 400:
            self.error_count += 1

        # Keep only the most recent response times
        if len(self.response_times) > self.window:
            self.response_times.pop(0)

        self.logger.info(f"API Request: {method} {endpoint} - {status_code} - {response_time:.4f}s")

    def get_api_stats(self):
        """Get API statistics"""
        if self.response_times:
            avg_response_time = sum(self.response_times) / len(self.response_times)
            max_response_time = max(self.response_times)
        else:
            avg_response_time = 0
            max_response_time = 0

        error_rate = (self.error_count / max(self.request_count, 1)) * 100

        return {
            'uptime_seconds': round(time.time() - self.start_time, 1),
            'total_requests': self.request_count,
            'error_count': self.error_count,
            'error_rate': error_rate,
            'avg_response_time': avg_response_time,
            'max_response_time': max_response_time
        }
