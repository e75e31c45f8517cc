"""Exceptions raised by the apply tooling."""


class TektonApplyError(Exception):
    """Base class for all errors raised by tekton_cd."""


class PreconditionError(TektonApplyError):
    """A required client binary is not available."""


class KubeCommandError(TektonApplyError):
    """A kubectl/oc/tkn invocation returned a non-zero exit code."""

    def __init__(self, cmd, returncode, stderr=""):
        self.cmd = list(cmd)
        self.returncode = returncode
        self.stderr = (stderr or "").strip()
        super().__init__(
            f"{' '.join(self.cmd)} failed with exit code {returncode}"
            + (f": {self.stderr}" if self.stderr else "")
        )


class ApplyError(TektonApplyError):
    """A mandatory resource definition could not be applied."""

    def __init__(self, definition, position, cause):
        self.definition = definition
        self.position = position
        self.cause = cause
        super().__init__(
            f"Failed to apply definition #{position} ({definition.path}): {cause}"
        )


class KubeOutputError(KubeCommandError):
    """A CLI call succeeded but its output could not be parsed."""

    def __init__(self, cmd, detail):
        self.cmd = list(cmd)
        self.returncode = 0
        self.stderr = detail
        TektonApplyError.__init__(
            self, f"{' '.join(self.cmd)} returned output that is not valid JSON: {detail}"
        )
