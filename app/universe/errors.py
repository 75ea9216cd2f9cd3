from typing import Iterable, List, Optional


class UniverseError(Exception):
    """Basisklasse für alle Fehler der Extension-Runtime."""


class ExtensionNotFound(UniverseError):
    """Für den Namen existiert weder ein ladbares Modul noch eine Host-Registrierung."""

    def __init__(self, name: str, message: Optional[str] = None):
        self.name = name
        super().__init__(message or f"Extension '{name}' wurde nicht gefunden.")


class MisconfiguredExtension(UniverseError):
    """Die deklarierten Abhängigkeiten können nie gemeinsam erfüllt werden."""

    def __init__(self, unsatisfied: Iterable[str], missing: Iterable[str] = (), cycle: Iterable[str] = ()):
        self.unsatisfied: List[str] = list(unsatisfied)
        self.missing: List[str] = list(missing)
        self.cycle: List[str] = list(cycle)

        message = f"Extensions mit unerfüllbaren Abhängigkeiten: {', '.join(self.unsatisfied)}"
        if self.cycle:
            message += f" | Zyklus: {' -> '.join(self.cycle)}"
        if self.missing:
            message += f" | Nie gebootet: {', '.join(self.missing)}"
        super().__init__(message)


class RegistryValidationError(UniverseError, ValueError):
    """Fehlerhafte Eingabe beim Anlegen von Registries."""


class RegistryNotFound(UniverseError, LookupError):
    """Registry existiert auch nach dem einmaligen Retry nicht."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Registry '{name}' existiert nicht.")
