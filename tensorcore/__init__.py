"""tensorcore: core tensor runtime utilities.

This package provides the pieces that sit under the ops of a tensor library:

- dtypes: Element types and type promotion.
- environment: Runtime flags.
- tensor: The Tensor handle.
- tensor_functions: Tensor constructors.
- tensor_util_env: Coercion of tensor-like values into tensors.
- tensor_util: Lists, name maps and nested containers of tensors.
- testing: Assertion helpers for tensor values.

"""

from .dtypes import *  # noqa: F401,F403
from .environment import Environment, env  # noqa: F401
from .tensor import *  # noqa: F401,F403
from .tensor_functions import *  # noqa: F401,F403
from .tensor_util_env import *  # noqa: F401,F403
from .tensor_util import *  # noqa: F401,F403
from .testing import *  # noqa: F401,F403
