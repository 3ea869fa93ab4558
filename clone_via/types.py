from dataclasses import dataclass

type ExitCode = int


@dataclass(frozen=True, slots=True)
class Refspec:
    src: str
    dst: str
    force: bool = True

    def __str__(self) -> str:
        return f"{'+' if self.force else ''}{self.src}:{self.dst}"
