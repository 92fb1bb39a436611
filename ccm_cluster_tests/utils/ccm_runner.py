"""Running the `ccm` cluster management tool."""

import asyncio
import codecs
import dataclasses
import logging
import typing as tp

from ccm_cluster_tests.utils import configuration
from ccm_cluster_tests.utils import types as ttypes

LOGGER = logging.getLogger(__name__)

BUFFER_SIZE = 64 * 1024

T = tp.TypeVar("T")


@dataclasses.dataclass(frozen=True)
class CCMResult:
    returncode: int
    stdout: tuple[str, ...]
    stderr: tuple[str, ...]

    @property
    def stdout_text(self) -> str:
        return "".join(self.stdout)

    @property
    def stderr_text(self) -> str:
        return "".join(self.stderr)


class CCMError(Exception):
    """The `ccm` command exited with non-zero return code."""

    def __init__(self, msg: str, *, result: CCMResult) -> None:
        super().__init__(msg)
        self.result = result


class OneShot(tp.Generic[T]):
    """Completion that can be settled only once.

    Any attempt to settle it again is ignored, so the waiter is woken up exactly once.
    """

    def __init__(self) -> None:
        self._future: asyncio.Future[T] | None = None

    @property
    def future(self) -> "asyncio.Future[T]":
        if self._future is None:
            self._future = asyncio.get_running_loop().create_future()
        return self._future

    def settled(self) -> bool:
        return self.future.done()

    def settle(self, value: T) -> bool:
        """Settle the completion with `value`; return False if it was already settled."""
        if self.future.done():
            return False
        self.future.set_result(value)
        return True

    async def wait(self) -> T:
        return await self.future


class CCMInvocation:
    """Single run of the `ccm` command."""

    def __init__(self, args: tp.Iterable[str], *, ccm_bin: str = "") -> None:
        self.args: ttypes.CCMArgs = tuple(str(a) for a in args)
        self.ccm_bin = ccm_bin or configuration.CCM_BIN
        self.stdout: list[str] = []
        self.stderr: list[str] = []
        self.completion: OneShot[CCMResult] = OneShot()

    @property
    def cmd(self) -> list[str]:
        return [self.ccm_bin, *self.args]

    @property
    def cmd_str(self) -> str:
        return " ".join(self.cmd)

    def on_exit(self, returncode: int) -> None:
        """Record the process exit.

        Only the first notification produces the result, duplicates are ignored.
        """
        result = CCMResult(
            returncode=returncode, stdout=tuple(self.stdout), stderr=tuple(self.stderr)
        )
        if not self.completion.settle(result):
            LOGGER.debug(f"Ignoring duplicate exit notification of `{self.cmd_str}`.")

    async def _drain(self, stream: asyncio.StreamReader | None, chunks: list[str]) -> None:
        if stream is None:
            return
        decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        while True:
            data = await stream.read(BUFFER_SIZE)
            if not data:
                break
            text = decoder.decode(data)
            if text:
                chunks.append(text)
        tail = decoder.decode(b"", final=True)
        if tail:
            chunks.append(tail)

    async def run(self) -> CCMResult:
        """Run the command and return its result once the process exits.

        Raises:
            CCMError: The command exited with non-zero return code.
        """
        LOGGER.debug(f"Running `{self.cmd_str}`")

        try:
            proc = await asyncio.create_subprocess_exec(
                *self.cmd, stdout=asyncio.subprocess.PIPE, stderr=asyncio.subprocess.PIPE
            )
        except FileNotFoundError as exc:
            msg = f"The `{self.ccm_bin}` executable was not found, is ccm installed?"
            raise RuntimeError(msg) from exc

        await asyncio.gather(
            self._drain(proc.stdout, self.stdout), self._drain(proc.stderr, self.stderr)
        )
        self.on_exit(await proc.wait())
        result = await self.completion.wait()

        if result.returncode != 0:
            msg = (
                f"An error occurred while running `{self.cmd_str}`:\n"
                f"{result.stderr_text}{result.stdout_text}"
            )
            raise CCMError(msg, result=result)

        return result


async def run_ccm(
    args: tp.Iterable[str], *, ignore_fail: bool = False, ccm_bin: str = ""
) -> CCMResult:
    """Run `ccm` with `args`.

    Args:
        args: Arguments passed to `ccm`.
        ignore_fail: Return the result of a failed command instead of raising `CCMError`.
            Meant for best-effort cleanup.
        ccm_bin: Path to the `ccm` executable (default: `configuration.CCM_BIN`).

    Returns:
        CCMResult: Return code and output chunks of the command.
    """
    invocation = CCMInvocation(args, ccm_bin=ccm_bin)
    try:
        return await invocation.run()
    except CCMError as exc:
        if not ignore_fail:
            raise
        LOGGER.debug(f"Ignoring failure of `{invocation.cmd_str}`: {exc}")
        return exc.result
