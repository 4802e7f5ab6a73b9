from dataclasses import dataclass

from ifcore.world import ConfigurationError

MAX_HINT_LEVEL = 3


@dataclass(frozen=True)
class HintPhase:
    phase_key: str
    hint1: str
    hint2: str
    hint3: str

    def hint(self, level):
        level = min(level, MAX_HINT_LEVEL)
        if level <= 1:
            return self.hint1
        if level == 2:
            return self.hint2
        return self.hint3


class HintConfiguration:
    """
    Hint phases plus a determiner that names the current phase.

    The determiner is called as determiner(session, world) and returns a
    phase key; unknown keys mean there is no hint for that moment.
    """

    def __init__(self, phases, determiner):
        self.phases = dict(phases)
        self.determiner = determiner

    def phase_for(self, session):
        key = self.determiner(session, session.world)
        return self.phases.get(key)


class HintConfigurationBuilder:
    def __init__(self):
        self._phases = {}
        self._determiner = None

    def add_phase(self, phase_key, hint1, hint2, hint3):
        for label, value in (("phase_key", phase_key), ("hint1", hint1),
                             ("hint2", hint2), ("hint3", hint3)):
            if value is None:
                raise ConfigurationError(f"{label} cannot be empty")
        self._phases[phase_key] = HintPhase(phase_key, hint1, hint2, hint3)
        return self

    def determiner(self, determiner):
        self._determiner = determiner
        return self

    def build(self):
        if self._determiner is None:
            raise ConfigurationError("A hint determiner must be set before building hints")
        return HintConfiguration(self._phases, self._determiner)
