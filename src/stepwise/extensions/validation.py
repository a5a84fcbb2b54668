"""
Input validation for operations, backed by pydantic models.

Declare the input model with a class keyword; every wrapped method then
validates its input before its body runs:

    class UserInput(BaseModel):
        name: str = Field(min_length=1)
        email: str = Field(min_length=1)
        age: int | None = None

    class CreateUser(Validation, Operation, params=UserInput):
        def call(self, input):
            user = self.step(self.create_user_record(input))
            self.step(self.send_welcome_email(user))
            return user

    CreateUser().call({"name": "Jane", "email": "jane@example.com"})
    CreateUser().call(name="Jane", email="jane@example.com")

`params=` validates in lax mode (coercion, "10" → 10); `schema=` validates
in strict mode (no coercion). The input is the first positional argument,
or the keyword arguments when no positional argument is given. The body
receives the validated data (a dict, unset optional fields left out): as
keyword arguments when its signature takes them, otherwise as its single
positional input.

Invalid input stops the call before its body with

    params=   Failure(("invalid_params", [error dicts]))
    schema=   Failure(("invalid", pydantic.ValidationError))

An instance attribute `contract` holding a model class overrides the
class-level model, e.g. to inject it through `__init__`.

Validation must come before Operation in the bases, so that it sees the
call first.
"""

from __future__ import annotations

import inspect
from dataclasses import dataclass
from typing import Any, Callable, ClassVar, Mapping

import structlog
from pydantic import BaseModel, ValidationError

from stepwise.mixin import StepsMixin
from stepwise.operation import Operation
from stepwise.result import Failure, Result, Success

log = structlog.get_logger(logger_name=__name__)

INVALID = "invalid"
INVALID_PARAMS = "invalid_params"


@dataclass(frozen=True, slots=True)
class Contract:
    """A pydantic model plus the mode it validates in."""

    model: type[BaseModel]
    strict: bool = False

    def __call__(self, payload: Mapping[str, Any]) -> Result[dict[str, Any], Any]:
        try:
            validated = self.model.model_validate(payload, strict=self.strict)
        except ValidationError as exc:
            if self.strict:
                return Failure((INVALID, exc))
            return Failure((INVALID_PARAMS, exc.errors()))
        return Success(validated.model_dump(exclude_unset=True))


def _takes_keywords(func: Callable[..., Any], names: Mapping[str, Any]) -> bool:
    params = inspect.signature(func).parameters
    if any(p.kind is inspect.Parameter.VAR_KEYWORD for p in params.values()):
        return True
    return bool(names) and all(
        name in params
        and params[name].kind in (inspect.Parameter.POSITIONAL_OR_KEYWORD, inspect.Parameter.KEYWORD_ONLY)
        for name in names
    )


class Validation(StepsMixin):
    """Mixin validating the input of every wrapped method."""

    _contract: ClassVar[Contract | None] = None

    def __init_subclass__(
        cls,
        params: type[BaseModel] | None = None,
        schema: type[BaseModel] | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init_subclass__(**kwargs)
        mro = cls.__mro__
        if Operation in mro and mro.index(Operation) < mro.index(Validation):
            raise TypeError(f"{cls.__name__}: list Validation before Operation in the bases")
        if params is not None and schema is not None:
            raise TypeError(f"{cls.__name__}: pass either params= or schema=, not both")
        if params is not None:
            cls._contract = Contract(params)
        elif schema is not None:
            cls._contract = Contract(schema, strict=True)

    def _call_wrapped(
        self,
        method_name: str,
        func: Callable[..., Any],
        args: tuple[Any, ...],
        kwargs: dict[str, Any],
    ) -> Any:
        contract = self._resolve_contract()
        if contract is None:
            return super()._call_wrapped(method_name, func, args, kwargs)  # type: ignore[misc]

        use_kwargs = not args and bool(kwargs)
        payload = kwargs if use_kwargs else (args[0] if args else {})

        validation = contract(payload)
        if isinstance(validation, Failure):
            log.debug(
                "validation.rejected",
                operation=type(self).__name__,
                method=method_name,
                kind=validation.error()[0],
            )
            self.throw_failure(validation)

        validated = validation.value()
        if not use_kwargs:
            return super()._call_wrapped(method_name, func, (validated, *args[1:]), kwargs)  # type: ignore[misc]
        if _takes_keywords(func, validated):
            return super()._call_wrapped(method_name, func, (), validated)  # type: ignore[misc]
        return super()._call_wrapped(method_name, func, (validated,), {})  # type: ignore[misc]

    def _resolve_contract(self) -> Contract | None:
        injected = vars(self).get("contract")
        if injected is not None:
            return injected if isinstance(injected, Contract) else Contract(injected)
        return type(self)._contract
