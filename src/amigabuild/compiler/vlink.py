from pathlib import Path
from typing import List, Optional, Sequence, Union
from ..parsing.diagnostics import CheckResult
from ..parsing.vlink_parser import VLINKParser
from ..utils.cancellation import CancellationToken
from ..utils.config import ConfigManager
from ..utils.lang import object_file_name
from .errors import BuildError
from .executor import Executor

PathLike = Union[str, Path]


class VLINKLinker:
    def __init__(self, config: ConfigManager, executor: Executor):
        self.config = config
        self.executor = executor
        self.parser = VLINKParser()

    def link_arguments(self, files: Sequence[PathLike], exe_filename: str, build_dir: PathLike) -> List[str]:
        """
        Linker arguments: configured options, the executable, then one object per source.
        """
        conf = self.config.get("vlink") or {}
        build_path = Path(build_dir)
        objects = [str(build_path / object_file_name(str(f))) for f in files]
        return list(conf.get("options", [])) + ["-o", str(build_path / exe_filename)] + objects

    async def link_files(self, files: Sequence[PathLike], exe_filename: str, workspace_root: PathLike,
                         build_dir: PathLike, token: Optional[CancellationToken] = None) -> List[CheckResult]:
        """
        Links the objects built from the given sources into exe_filename.
        """
        conf = self.config.get("vlink")
        if not conf or not conf.get("file"):
            raise BuildError("Please configure VLINK linker")

        args = self.link_arguments(files, exe_filename, build_dir)
        return await self.executor.run_tool(
            conf["file"],
            args,
            self.parser,
            cwd=str(workspace_root),
            use_stderr=True,
            token=token,
        )
