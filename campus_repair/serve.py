"""Run the API on the first free port from PORTS.

Usage:
    python -m campus_repair.serve
"""
import logging
import socket
import sys

import uvicorn

from campus_repair.core import config
from campus_repair.core.logging import configure_logging

logger = logging.getLogger(__name__)


def bind_first_available(host: str, ports: list[int]) -> socket.socket:
    """Bind a listening socket to the first port that is free.

    Raises ``OSError`` naming every port tried when none can be bound.
    """
    failures = []
    for port in ports:
        sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        try:
            sock.bind((host, port))
        except OSError as exc:
            sock.close()
            logger.warning('Port %s unavailable (%s), trying next port...', port, exc.strerror or exc)
            failures.append(f'{port}: {exc.strerror or exc}')
            continue
        sock.listen(2048)
        sock.set_inheritable(True)
        return sock
    raise OSError('Unable to start server on provided ports: ' + ', '.join(failures or ['none configured']))


def main() -> None:
    configure_logging()
    try:
        config.validate_runtime_config()
        sock = bind_first_available(config.HOST, config.server_ports())
    except (RuntimeError, OSError) as exc:
        logger.error('%s', exc)
        sys.exit(1)

    host, port = sock.getsockname()[:2]
    logger.info('Server running on http://%s:%s', host, port)
    server = uvicorn.Server(uvicorn.Config('campus_repair.main:app', log_config=None))
    server.run(sockets=[sock])


if __name__ == '__main__':
    main()
