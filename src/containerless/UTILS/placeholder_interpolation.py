# Copyright 2024 Michael Maillet, Damien Davison, Sacha Davison
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
Utilities for replacing ${name} placeholders in template text.
"""
import re
from typing import Dict, List

PLACEHOLDER_PATTERN = re.compile(r'\$\{([^}]+)\}')


class PlaceholderInterpolator:
    """
    Replaces ${name} placeholders with values from a context.

    Placeholders without a value in the context are kept verbatim instead of
    raising, so templates may carry tokens meant for a later build step.
    """
    @staticmethod
    def interpolate(template: str, context: Dict[str, str]) -> str:
        """
        Interpolates placeholders in the template using the provided context.

        :param template: The text containing ${name} placeholders.
        :param context: Placeholder values by name.
        :return: The interpolated text.
        """
        def replace(match):
            name = match.group(1)
            if name in context:
                return str(context[name])
            return match.group(0)

        return PLACEHOLDER_PATTERN.sub(replace, template)

    @staticmethod
    def unresolved(template: str, context: Dict[str, str]) -> List[str]:
        """
        Lists the placeholder names of the template missing from the context.
        """
        return [name for name in PLACEHOLDER_PATTERN.findall(template) if name not in context]
