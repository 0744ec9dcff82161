"""
Java compile-and-run
Every request gets its own temporary workspace; each step runs under a timeout
and, on POSIX, a CPU-seconds limit. Output is capped.
"""

import asyncio
import logging
import os
import sys
import tempfile
from dataclasses import dataclass
from typing import List, Optional, Tuple

from codepets.config import settings

logger = logging.getLogger(__name__)

FATHER_FILE = "Father.java"
MAIN_FILE = "Main.java"
MAIN_CLASS = "Main"
READ_CHUNK_BYTES = 4096


@dataclass
class StepResult:
    returncode: Optional[int]
    stdout: str
    stderr: str
    timed_out: bool = False
    truncated: bool = False


def _limit_cpu(seconds: int):
    def apply():
        import resource
        resource.setrlimit(resource.RLIMIT_CPU, (seconds, seconds))
    return apply


class JavaRunner:
    def __init__(
        self,
        javac_bin: str = "javac",
        java_bin: str = "java",
        timeout_seconds: int = 10,
        max_output_bytes: int = 64 * 1024,
        max_concurrency: int = 4
    ):
        self.javac_bin = javac_bin
        self.java_bin = java_bin
        self.timeout_seconds = timeout_seconds
        self.max_output_bytes = max_output_bytes
        self._semaphore = asyncio.Semaphore(max_concurrency)

    @staticmethod
    def _decode(data: bytes, truncated: bool) -> str:
        text = data.decode("utf-8", errors="replace")
        if truncated:
            text += "\n... output truncated"
        return text

    async def _read_capped(self, stream, process) -> Tuple[bytes, bool]:
        """
        Read a pipe until EOF, keeping at most max_output_bytes

        The process is killed as soon as the cap is crossed, so a program
        printing in a loop never gets buffered past the cap.
        """
        data = bytearray()
        while True:
            chunk = await stream.read(READ_CHUNK_BYTES)
            if not chunk:
                return bytes(data), False
            room = self.max_output_bytes - len(data)
            data.extend(chunk[:room])
            if len(chunk) > room:
                try:
                    process.kill()
                except ProcessLookupError:
                    pass
                return bytes(data), True

    async def _collect(self, process) -> StepResult:
        (stdout, out_cut), (stderr, err_cut) = await asyncio.gather(
            self._read_capped(process.stdout, process),
            self._read_capped(process.stderr, process),
        )
        await process.wait()
        return StepResult(
            returncode=process.returncode,
            stdout=self._decode(stdout, out_cut),
            stderr=self._decode(stderr, err_cut),
            truncated=out_cut or err_cut,
        )

    async def _run_step(self, args: List[str], cwd: str) -> StepResult:
        kwargs = {}
        if sys.platform != "win32":
            # Wall-clock timeout below still applies; this bounds CPU burn
            kwargs["preexec_fn"] = _limit_cpu(self.timeout_seconds)

        process = await asyncio.create_subprocess_exec(
            *args,
            cwd=cwd,
            stdin=asyncio.subprocess.DEVNULL,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
            **kwargs
        )
        try:
            return await asyncio.wait_for(self._collect(process), timeout=self.timeout_seconds)
        except asyncio.TimeoutError:
            try:
                process.kill()
            except ProcessLookupError:
                pass
            await process.wait()
            return StepResult(returncode=None, stdout="", stderr="", timed_out=True)

    async def compile_and_run(self, father_code: str, main_code: str) -> str:
        """
        Compile Father.java + Main.java and run Main

        Returns compiler stderr on a failed compile, runtime stderr on a failed
        run, stdout otherwise. A program whose output crosses the cap is
        killed and gets back what was read up to the cap.
        """
        async with self._semaphore:
            with tempfile.TemporaryDirectory(prefix="codepets-java-") as workspace:
                with open(os.path.join(workspace, FATHER_FILE), "w", encoding="utf-8") as f:
                    f.write(father_code)
                with open(os.path.join(workspace, MAIN_FILE), "w", encoding="utf-8") as f:
                    f.write(main_code)

                try:
                    compiled = await self._run_step([self.javac_bin, FATHER_FILE, MAIN_FILE], workspace)
                except FileNotFoundError:
                    logger.error("Java compiler not found: %s", self.javac_bin)
                    return "Java toolchain is not available on this server"

                if compiled.timed_out:
                    logger.warning("Compilation timed out after %ss", self.timeout_seconds)
                    return f"Compilation timed out after {self.timeout_seconds}s"
                if compiled.returncode != 0:
                    return compiled.stderr

                try:
                    ran = await self._run_step([self.java_bin, "-cp", workspace, MAIN_CLASS], workspace)
                except FileNotFoundError:
                    logger.error("Java runtime not found: %s", self.java_bin)
                    return "Java toolchain is not available on this server"

                if ran.timed_out:
                    logger.warning("Execution timed out after %ss", self.timeout_seconds)
                    return f"Execution timed out after {self.timeout_seconds}s"
                if ran.truncated:
                    logger.warning("Program output exceeded %d bytes, process killed", self.max_output_bytes)
                    return ran.stdout + ran.stderr
                if ran.returncode != 0:
                    return ran.stderr
                return ran.stdout


runner = JavaRunner(
    javac_bin=settings.JAVAC_BIN,
    java_bin=settings.JAVA_BIN,
    timeout_seconds=settings.COMPILER_TIMEOUT_SECONDS,
    max_output_bytes=settings.COMPILER_MAX_OUTPUT_BYTES,
    max_concurrency=settings.COMPILER_MAX_CONCURRENCY,
)


def get_runner() -> JavaRunner:
    """Runner dependency"""
    return runner
