from typing import Optional

from mongit.mongo.targets.base import Target


class HostTarget(Target):
    """
    Runs the MongoDB tools on this machine.
    """

    def dump(self, uri: Optional[str] = None) -> None:
        self._replace_dump_dir(
            lambda out: self._runner([self.dump_binary, *self._connection_args(uri),
                                      '--out', str(out)])
        )

    def restore(self, uri: Optional[str] = None, drop: bool = False) -> None:
        self._runner([self.restore_binary, *self._connection_args(uri, drop),
                      str(self.dump_dir)])
