# flowspec

Typed data model for parts of declarative serverless workflow definitions.
It converts to and from JSON-compatible Python values and checks values
against the rules of the workflow specification.

## Installation

```
pip install flowspec
```

No third-party packages are needed at run time.

## Modules

- `flowspec.validation`: `is_iso8601_duration_valid`,
  `is_semantic_version_valid`, `is_hostname_valid` (RFC 1123),
  `validate_object_or_string` and `validate_switch_item`. It also holds the
  two exceptions used throughout the package: `DecodeError` and
  `ValidationError`. Both are subclasses of `ValueError`.
- `flowspec.durations`: `Duration` (an inline value or an ISO 8601
  expression), `DurationInline`, `DurationExpression`, `Timeout` and
  `TimeoutOrReference`.
- `flowspec.retry`: `RetryPolicy`, `RetryBackoff`, `BackoffDefinition`,
  `RetryLimit`, `RetryLimitAttempt`, `RetryPolicyJitter`, `TryTaskCatch`
  and `resolve_retry_policies`.
- `flowspec.run`: `RunTaskConfiguration`, which holds exactly one of
  `Container`, `Script`, `Shell` or `RunWorkflow`.
- `flowspec.raising`: `ErrorDefinition`, `ErrorFilter` and
  `RaiseTaskError`. A `RaiseTaskError` is either a string reference or an
  inline definition.
- `flowspec.workflow`: `Document`, `Schema`, `Schedule`, `FlowDirective`
  and `FlowDirectiveType` (`continue`, `exit`, `end`).

## Usage

Most model classes work the same way:

- `from_json(data)` builds an instance from parsed JSON: dicts, lists,
  strings and numbers.
- `to_json()` produces that JSON-compatible value again.
- Malformed input raises `DecodeError`.
- Where a class has `validate()`, it raises `ValidationError` when a value
  breaks a constraint. The error's `namespace`, `field` and `tag`
  attributes name the failing field and the rule it broke.

```python
import json

from flowspec.durations import Duration, Timeout, TimeoutOrReference
from flowspec.retry import RetryPolicy, TryTaskCatch
from flowspec.validation import is_iso8601_duration_valid
from flowspec.workflow import Document, FlowDirective

timeout = Timeout.from_json({"after": {"days": 1, "hours": 2}})
print(timeout.after.as_inline().hours)          # 2
print(json.dumps(timeout.to_json()))            # {"after": {"days": 1, "hours": 2}}

ref = TimeoutOrReference.from_json("some-timeout-reference")
print(ref.reference)                            # some-timeout-reference

wait = Duration.from_expression("P1DT1H")
print(wait.as_expression())                     # P1DT1H

catch = TryTaskCatch.from_json({"retry": "default"})
policies = {"default": RetryPolicy.from_json({"delay": "PT5S"})}
catch.retry.resolve_reference(policies)
print(catch.retry.delay.as_expression())        # PT5S

print(FlowDirective("exit").is_enum())          # True

doc = Document(dsl="1.0.0", namespace="examples", name="demo", version="1.0.0")
doc.validate()                                  # passes

print(is_iso8601_duration_valid("P1DT12H30M"))  # True
print(is_iso8601_duration_valid("P"))           # False
```

## What the package does not do

The package covers durations, timeouts, retry policies and catch clauses,
run-task configuration, error definitions, and workflow metadata
(document, schema, schedule and flow directives). It does not cover the
following:

- It has no model of a complete workflow or of task lists. It has no
  for, fork, switch, set, wait or call tasks, and no authentication
  policies or endpoints. Where these appear inside the supported objects,
  such as a catch clause's `do` list, a script's `source` or a schema's
  `resource`, they are kept as plain dicts and lists.
- It does not read workflow files or YAML.
- It has no command-line tool.
- It does not run workflows.

## Running the tests

```
pip install "flowspec[test]"
pytest
```