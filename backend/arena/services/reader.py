"""Supervisor for the card reader child process.

The reader script scans cards and POSTs each roll number to /register.
Only one reader may run at a time; its output is forwarded to the app log.
"""

import os
import shlex
import signal
import subprocess
import threading

from arena import socketio
from arena.services.games.errors import ReaderAlreadyRunning, ReaderNotRunning, ReaderStartError


class ReaderProcess:
    def __init__(self, app):
        self._app = app
        self._lock = threading.Lock()
        self._proc = None

    def _command(self):
        cmd = self._app.config.get('NFC_READER_CMD')
        return shlex.split(cmd) if isinstance(cmd, str) else list(cmd)

    def _env(self):
        env = dict(os.environ)
        env['SERIAL_PATH'] = str(self._app.config.get('SERIAL_PATH', 'COM5'))
        env['BACKEND_URL'] = str(self._app.config.get('BACKEND_URL', 'http://localhost:3000'))
        return env

    def _live(self):
        if self._proc is not None and self._proc.poll() is not None:
            self._app.logger.info(f"[nfc] Process exited with code {self._proc.returncode}")
            self._proc = None
        return self._proc

    def start(self) -> int:
        with self._lock:
            if self._live() is not None:
                raise ReaderAlreadyRunning('NFC reader is already running')
            cmd = self._command()
            self._app.logger.info(f"[reader-start] {' '.join(cmd)}")
            try:
                proc = subprocess.Popen(
                    cmd,
                    env=self._env(),
                    stdout=subprocess.PIPE,
                    stderr=subprocess.PIPE,
                    text=True,
                )
            except OSError as exc:
                self._app.logger.error(f"[reader-start] failed to start process: {exc}")
                raise ReaderStartError(str(exc)) from exc
            self._proc = proc
        socketio.start_background_task(self._pump, proc.stdout, '[nfc]', self._app.logger.info)
        socketio.start_background_task(self._pump, proc.stderr, '[nfc-error]', self._app.logger.error)
        return proc.pid

    def stop(self) -> None:
        with self._lock:
            proc = self._live()
            if proc is None:
                raise ReaderNotRunning('NFC reader is not running')
            self._app.logger.info('[reader-stop] Stopping NFC reader...')
            proc.send_signal(signal.SIGTERM)
            self._proc = None
        # reap the child without blocking the request
        socketio.start_background_task(proc.wait)

    def status(self) -> dict:
        with self._lock:
            proc = self._live()
            return {'running': proc is not None, 'pid': proc.pid if proc is not None else None}

    @staticmethod
    def _pump(stream, tag, log):
        for line in stream:
            line = line.strip()
            if line:
                log(f"{tag} {line}")
        stream.close()
