import asyncio
import os
from typing import List, Mapping, Optional, Sequence
from ..parsing.diagnostics import CheckResult, OutputParser
from ..utils.cancellation import CancellationToken
from ..utils.output import OutputChannel
from .process_killer import ProcessTreeKiller, default_tree_killer


class Executor:
    def __init__(self, output_channel: Optional[OutputChannel] = None,
                 tree_killer: Optional[ProcessTreeKiller] = None):
        self.output_channel = output_channel if output_channel else OutputChannel()
        self.tree_killer = tree_killer if tree_killer else default_tree_killer(self.output_channel.log)

    async def run_tool(self, cmd: str, args: Sequence[str], parser: OutputParser,
                       cwd: Optional[str] = None, env: Optional[Mapping[str, str]] = None,
                       use_stderr: bool = False,
                       token: Optional[CancellationToken] = None) -> List[CheckResult]:
        """
        Runs the given tool and returns the errors/warnings parsed from its output.

        cmd: path and name of the tool to run
        args: arguments passed to the tool
        parser: parser for the primary output channel
        cwd / env: working directory and environment of the tool (None inherits ours)
        use_stderr: if True stderr is the primary channel, else stdout
        token: cancelling it kills the tool and all of its children

        Infrastructure failures never raise: a missing tool or unexpected fatal
        output resolves to an empty list.
        """
        args = list(args)
        try:
            process = await asyncio.create_subprocess_exec(
                cmd,
                *args,
                cwd=cwd,
                env=dict(env) if env is not None else None,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except FileNotFoundError:
            # Run on every save: a missing tool must stay quiet
            self.output_channel.log(f"Cannot find {cmd}")
            return []
        except OSError as e:
            # Not executable, bad cwd: reported but never raised
            self.output_channel.append_line(" ".join(["Error while running tool:", cmd, *args]))
            self.output_channel.append_line(str(e))
            return []

        loop = asyncio.get_running_loop()

        def kill_in_background():
            # The grace wait of the killer must not block the other runs on the loop
            loop.run_in_executor(None, self.kill_tree, process.pid)

        unsubscribe = None
        if token:
            unsubscribe = token.on_cancellation_requested(
                lambda: loop.call_soon_threadsafe(kill_in_background)
            )
        try:
            stdout_bytes, stderr_bytes = await process.communicate()
        except asyncio.CancelledError:
            # The awaiting task went away, the tool must not outlive it
            kill_in_background()
            raise
        finally:
            if unsubscribe:
                unsubscribe()

        stdout = stdout_bytes.decode(errors="replace")
        stderr = stderr_bytes.decode(errors="replace")

        if process.returncode != 0 and stderr and not use_stderr:
            self.output_channel.append_line(" ".join(["Error while running tool:", cmd, *args]))
            self.output_channel.append_line(stderr)
            return []

        text = stderr if use_stderr else stdout
        self.output_channel.append_line(" ".join([f"{cwd or os.getcwd()}>Finished running tool:", cmd, *args]))
        results = parser.parse(text)
        self.output_channel.append_line("")
        return results

    def kill_tree(self, pid: int):
        try:
            self.tree_killer.kill_tree(pid)
        except Exception as e:
            # Best effort: a failed kill never fails the run
            self.output_channel.log(f"Error killing process tree {pid}: {e}")
