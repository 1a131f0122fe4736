"""Test suite for the Tucker3 package."""

from tucker3.tests.test_decomposition import *  # noqa: F403
from tucker3.tests.test_tensor3 import *  # noqa: F403
from tucker3.tests.test_tucker import *  # noqa: F403
from tucker3.tests.test_utils import *  # noqa: F403
