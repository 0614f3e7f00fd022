from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class GeneratedAccount:
    """A confirmed account. Only ever built after the account service accepted the key."""
    email: str
    password: str
    name: str

    def __str__(self) -> str:
        return f"Email: {self.email}\nPassword: {self.password}\nName: {self.name}"


def append_account(path: str | os.PathLike[str], account: GeneratedAccount) -> None:
    """Append one `---`-separated record block followed by a blank line."""
    out_path = Path(path)
    if out_path.parent and not out_path.parent.exists():
        out_path.parent.mkdir(parents=True, exist_ok=True)
    with out_path.open("a", encoding="utf-8") as f:
        f.write("---\n")
        f.write(f"{account}\n")
        f.write("\n")
