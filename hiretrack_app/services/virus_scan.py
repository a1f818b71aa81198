"""
ClamAV virus scanning.

One scanner per process. It connects to the clamd socket on first use; if the
daemon is missing it stays unavailable for the life of the process and every
file is treated as clean.
"""
import logging
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)

UNINITIALIZED = 'uninitialized'
CONNECTING = 'connecting'
READY = 'ready'
UNAVAILABLE = 'unavailable'


@dataclass
class ScanResult:
    clean: bool
    viruses: list = field(default_factory=list)


class VirusScanner:
    """Lazily-connected clamd client that fails open."""

    def __init__(self, socket_path='/var/run/clamav/clamd.ctl', timeout=30, enabled=True):
        self.socket_path = socket_path
        self.timeout = timeout
        self.enabled = enabled
        self.state = UNINITIALIZED
        self._client = None

    def init_app(self, app):
        self.socket_path = app.config['CLAMAV_SOCKET']
        self.timeout = app.config['CLAMAV_TIMEOUT']
        self.enabled = app.config['VIRUS_SCAN_ENABLED']
        self.reset()

    def reset(self):
        self.state = UNINITIALIZED
        self._client = None

    def _connect(self):
        if self.state != UNINITIALIZED:
            return
        if not self.enabled:
            self.state = UNAVAILABLE
            logger.info("ClamAV: scanning disabled by configuration")
            return

        self.state = CONNECTING
        try:
            import pyclamd
            client = pyclamd.ClamdUnixSocket(filename=self.socket_path, timeout=self.timeout)
            client.ping()
        except Exception as e:
            self.state = UNAVAILABLE
            logger.warning("ClamAV: not available, virus scanning disabled (%s)", e)
            return

        self._client = client
        self.state = READY
        logger.info("ClamAV: connected via %s", self.socket_path)

    def scan(self, path):
        """Scan a file on disk. Returns clean when scanning is unavailable or errors."""
        self._connect()
        if self.state != READY:
            return ScanResult(clean=True)

        try:
            result = self._client.scan_file(path)
        except Exception:
            logger.exception("ClamAV: scan failed for %s, allowing file", path)
            return ScanResult(clean=True)

        if not result:
            return ScanResult(clean=True)

        viruses = [name for status, name in result.values() if status == 'FOUND' and name]
        if not viruses:
            return ScanResult(clean=True)
        logger.warning("ClamAV: %s infected with %s", path, ', '.join(viruses))
        return ScanResult(clean=False, viruses=viruses)


scanner = VirusScanner()


def scan_file(path):
    return scanner.scan(path)
