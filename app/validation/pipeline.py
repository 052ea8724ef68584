"""Composable, per-verb validation of submitted resources.

A pipeline is a list of rule groups. Each group targets one field and runs
its rules in order, stopping at the first one that fails, so a malformed
value is reported once instead of tripping every downstream check. Groups
can be made conditional on the rest of the payload with ``when``.
"""

import inspect
import logging
from enum import Enum
from typing import Any, Awaitable, Callable, Iterable, List, Sequence

from pydantic.alias_generators import to_camel

from app.core.errors import FieldFailure

logger = logging.getLogger(__name__)

# check(value, payload) -> bool, sync or async
Check = Callable[[Any, Any], bool | Awaitable[bool]]
Condition = Callable[[Any], bool]


class WriteVerb(str, Enum):
    CREATE = "create"
    UPDATE = "update"


class Rule:
    """A single check plus the message reported when it fails.

    ``message`` may reference the checked value as ``{value}``.
    """

    def __init__(self, check: Check, message: str):
        self.check = check
        self.message = message

    async def passes(self, value: Any, payload: Any) -> bool:
        result = self.check(value, payload)
        if inspect.isawaitable(result):
            result = await result
        return bool(result)

    def describe(self, value: Any) -> str:
        return self.message.replace("{value}", str(value))


class RuleGroup:
    """Ordered rules for one field of the payload."""

    def __init__(
        self,
        field: str,
        rules: Sequence[Rule],
        when: Condition | None = None,
    ):
        self.field = field
        self.rules = list(rules)
        self.when = when
        self.property_name = to_camel(field)

    def applies_to(self, payload: Any) -> bool:
        return self.when is None or self.when(payload)

    async def validate(self, payload: Any) -> FieldFailure | None:
        """Return the first failure of this group, or None."""
        if not self.applies_to(payload):
            return None

        value = getattr(payload, self.field)
        for rule in self.rules:
            if not await rule.passes(value, payload):
                return FieldFailure(
                    property_name=self.property_name,
                    error_message=rule.describe(value),
                    attempted_value=value,
                )
        return None


class ValidationPipeline:
    """Shared rule groups plus verb-specific additions.

    Shared groups run first, then the groups registered for the verb, all
    in declaration order. Every group runs; only rules inside a group
    short-circuit.
    """

    def __init__(
        self,
        shared: Iterable[RuleGroup] = (),
        create: Iterable[RuleGroup] = (),
        update: Iterable[RuleGroup] = (),
    ):
        self._shared = list(shared)
        self._by_verb = {
            WriteVerb.CREATE: list(create),
            WriteVerb.UPDATE: list(update),
        }

    def groups_for(self, verb: WriteVerb) -> List[RuleGroup]:
        return self._shared + self._by_verb[verb]

    async def validate(self, payload: Any, verb: WriteVerb) -> List[FieldFailure]:
        """Return the failures for ``payload``; an empty list means valid."""
        failures: List[FieldFailure] = []
        for group in self.groups_for(verb):
            failure = await group.validate(payload)
            if failure is not None:
                failures.append(failure)

        if failures:
            logger.debug(
                "%s rejected with %d failure(s): %s",
                verb.value,
                len(failures),
                ", ".join(f.property_name for f in failures),
            )
        return failures
