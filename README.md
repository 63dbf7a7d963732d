# gomer

Building blocks for services that expose resources over an API.

## What is in the package

- **Errors** (`gomer.errors`): every failure is raised as a subclass of
  `GomerError`, which carries a message and named attributes
  (`add_attribute`, `replace_attribute`, `attribute`). The subclasses are
  `ConfigurationError`, `UnprocessableError`, `BadValueError`,
  `NotFoundError`, `InternalError`, `DependencyError`, `MarshalError`,
  `UnmarshalError`, `BatchError` and `NotSatisfiedError`. The function
  `batcher` turns a list of errors into `None`, the single error, or a
  `BatchError`.
- **Constraints**:
  - `gomer.constraint.base` holds `Constraint`, which has `test(value)` and
    `validate(target, value)`. `validate` labels errors with the target's
    name. It also holds the combinators `and_`, `or_` and `not_`, and the
    fixed constraints `success`, `fail` and `configuration_error`.
  - `gomer.constraint.checks` holds value checks:
    - comparisons: `int_compare`, `uint_compare`, `float_compare` and
      `time_compare` with `"EQ"`, `"NEQ"`, `"GT"`, `"GTE"`, `"LT"` and
      `"LTE"`, and the inclusive `*_between` variants;
    - `equals`, `not_equals` and `one_of`;
    - `length`, `min_length` and `max_length`;
    - `starts_with`, `ends_with`, `regexp` and `regexp_match`;
    - `nil_`, `not_nil`, `zero` and `not_zero`;
    - the constants `EMPTY`, `NON_EMPTY`, `IS_REGEXP`, `IS_NIL`,
      `IS_NOT_NIL`, `IS_ZERO`, `IS_NOT_ZERO` and `REQUIRED`.
  - `gomer.constraint.containers` applies constraints to mappings and
    sequences. It holds `map_`, `map_keys`, `map_values`, `entries` (each
    pair passed as an `Entry`), `elements` and the exact-type check
    `type_of`.
- **Binding helpers**:
  - `gomer.bind.config` holds `Configuration`, built with
    `new_configuration` or `copy_configuration_with_options`. The options are
    `empty_directive_skips_field`, `empty_directive_includes_field`,
    `omit_empty`, `include_empty`, `pascal_case_data`, `camel_case_data` and
    `extends_with`.
  - `gomer.bind.b64` is a registry of named tool functions
    (`register_tool_function`, `get_tool_function`). It comes with base64
    encoders and decoders registered as `$_b64Encode`, `$_b64RawEncode`,
    `$_b64UrlEncode`, `$_b64RawUrlEncode` and the matching `...Decode` names.
  - `gomer.bind.stash` provides `stash` and `unstash`. `stash` picks entries
    out of a mapping. `unstash` writes values into a nested mapping at a
    dotted path. Inclusion predicates decide what is kept: `is_field`,
    `is_not_field`, `all_`, `name_matches`, `if_all` and `if_any`.
- **API operations** (`gomer.api.op`): `Op` is an integer that combines a
  `Method` with a `Category` and a built-in/customer flag. Build one with
  `new_op`, or use the built-in constants such as `GET_INSTANCE` and
  `POST_COLLECTION`. It reports back through `is_valid`, `method_name`,
  `category` and `is_built_in`.
- **Envelope encryption** (`gomer.crypto.kms`): `KmsDataKeyEncrypter`
  encrypts with AES-256-GCM under a fresh data key from any object that
  follows the `KmsClient` protocol. `KmsDataKeyDecrypter` reverses this, and
  `Cipher` pairs the two. `encode` and `decode` handle the byte layout, which
  is a version byte followed by the length-prefixed ciphertext, encrypted
  data key and nonce. Errors the client raises as `KmsError` are translated
  into `NotFoundError`, `BadValueError` or `DependencyError`.

## Install

```
pip install .
```

## Example

```python
from gomer.constraint.base import and_, or_
from gomer.constraint.checks import IS_NIL, length, starts_with
from gomer.errors import NotSatisfiedError

check = and_(length(1, 5), starts_with("h"))
check.validate("name", "hello")      # passes

try:
    check.validate("name", "")
except NotSatisfiedError as err:
    print(err.target)                # name

optional = or_(IS_NIL, length(1, 5))
optional.validate("nickname", None)  # passes
```

```python
from gomer.api.op import GET_INSTANCE, Category, Method, new_op

GET_INSTANCE.method_name()                  # "GET"
op = new_op(Method.PATCH, Category.COLLECTION)
op.is_built_in()                            # False
```

## What the package does not do

- Constraints are built in code. There is no parser for text directives
  such as `"or(nil,len(1,5))"`.
- Nothing applies constraints to the fields of an object for you. Call
  `validate` on each value yourself.
- There are no tools that bind request data into objects or render objects
  into dictionaries. `gomer.bind` provides only the configuration,
  tool-function registry, base64 and stash helpers listed above.
- There is no access control: no principals, no subjects, no per-field
  permissions. The `gomer.auth` package holds no modules.
- There is no KMS client. Supply your own object with `generate_data_key`
  and `decrypt` methods.
- There is no HTTP server and no command-line program.

## Tests

```
pip install .[test]
pytest
```