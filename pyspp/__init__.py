# Copyright 2024 inuex35
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""
PySPP - GPS Single Point Positioning Engine

Propagates broadcast Keplerian element sets to observation epochs, rotates
them Earth-fixed, aligns pseudoranges across satellites and solves receiver
position and clock bias per epoch by iterative least squares.
"""

__version__ = "1.0.0"
__author__ = "PySPP Development Team"
__title__ = "pyspp"
__description__ = "GPS single point positioning engine"

from .logger import *
from .core import *
from .coordinate import *
from .satellite import *
from .observation import *
from .gnss import *
from .io import *
