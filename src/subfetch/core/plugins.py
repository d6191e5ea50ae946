"""Post-processing plugins run against freshly saved subtitles."""

import shlex
import subprocess
from typing import Iterable

from pydantic import BaseModel, Field

from subfetch.exceptions import PluginError
from subfetch.models.subtitle import LocalSubtitle
from subfetch.utils.logger import get_logger

logger = get_logger(__name__)

PLACEHOLDER = "{}"


class Plugin(BaseModel):
    """External command executed for every saved subtitle.

    The placeholder ``{}`` in ``exec`` is replaced by the shell-quoted
    absolute path of the subtitle, e.g. ``exec: "chmod 644 {}"``.
    """

    name: str = Field(..., description="Plugin name used in logs")
    exec: str = Field(..., description="Shell command template")

    def command(self, subtitle: LocalSubtitle) -> str:
        """Render the command line for a subtitle."""
        return self.exec.replace(PLACEHOLDER, shlex.quote(str(subtitle.path.resolve())))

    def run(self, subtitle: LocalSubtitle, timeout: float = 60.0) -> str:
        """Execute the plugin through the system shell.

        Args:
            subtitle: Subtitle the plugin operates on
            timeout: Maximum execution time in seconds

        Returns:
            Combined stdout/stderr output

        Raises:
            PluginError: On non-zero exit status, timeout or OS error
        """
        cmd = self.command(subtitle)
        logger.debug("Executing plugin", plugin=self.name, command=cmd)

        try:
            result = subprocess.run(
                cmd,
                shell=True,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True,
                timeout=timeout,
            )
        except subprocess.TimeoutExpired as e:
            output = e.output or ""
            if isinstance(output, bytes):
                output = output.decode(errors="replace")
            raise PluginError(
                f"plugin {self.name} timed out after {timeout}s", plugin=self.name, output=output
            ) from None
        except OSError as e:
            raise PluginError(
                f"plugin {self.name} could not be started: {e}", plugin=self.name
            ) from None

        if result.returncode != 0:
            raise PluginError(
                f"plugin {self.name} exited with status {result.returncode}",
                plugin=self.name,
                output=result.stdout,
            )

        return result.stdout


class PluginPipeline:
    """Run plugins in order against a persisted subtitle."""

    def __init__(self, plugins: Iterable[Plugin] = (), timeout: float = 60.0):
        """Initialize plugin pipeline.

        Args:
            plugins: Plugins in execution order
            timeout: Per-plugin timeout in seconds
        """
        self.plugins = list(plugins)
        self.timeout = timeout

    def run(self, subtitle: LocalSubtitle) -> None:
        """Run every plugin, stopping at the first failure.

        The subtitle file is left in place whatever the outcome.

        Raises:
            PluginError: From the first plugin that failed
        """
        for plugin in self.plugins:
            try:
                plugin.run(subtitle, timeout=self.timeout)
            except PluginError as e:
                logger.error(
                    "Plugin failed",
                    plugin=plugin.name,
                    file=str(subtitle.path),
                    error=str(e),
                    output=e.output[-2000:],
                )
                raise

            logger.info("Plugin finished", plugin=plugin.name, file=str(subtitle.path))
