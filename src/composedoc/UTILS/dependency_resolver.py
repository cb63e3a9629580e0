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
Dependency resolution for services to determine startup order and dangling references.
"""
from typing import Dict, List, Set

from ..errors import CircularDependencyError
from ..MODELS.compose_document import ComposeDocument


class DependencyResolver:
    """
    Resolves the startup order of services based on their depends_on sets.
    """
    def resolve_order(self, document: ComposeDocument) -> List[str]:
        """
        Determines the order to start services using a topological sort.
        Services at the same depth are visited in name order, so the result is stable.

        :param document: The compose document.
        :return: Service names, dependencies first.
        :raises CircularDependencyError: If services depend on each other in a cycle.
        """
        services = document.services
        dependencies = {name: sorted(svc.depends_on or {}) for name, svc in services.items()}

        ordered: List[str] = []
        visited: Set[str] = set()
        processing: List[str] = []

        def visit(name: str) -> None:
            if name in processing:
                cycle = processing[processing.index(name):] + [name]
                raise CircularDependencyError(f"Circular dependency detected: {' -> '.join(cycle)}")
            if name not in visited:
                processing.append(name)
                for dep in dependencies[name]:
                    if dep in services:  # dangling references are reported by missing_dependencies
                        visit(dep)
                processing.pop()
                visited.add(name)
                ordered.append(name)

        for name in sorted(services):
            visit(name)

        return ordered

    def missing_dependencies(self, document: ComposeDocument) -> Dict[str, List[str]]:
        """
        Finds depends_on entries naming services the document does not define.

        :param document: The compose document.
        :return: Service name -> sorted missing dependency names, only for services with any.
        """
        missing = {}
        for name in sorted(document.services):
            deps = document.services[name].depends_on or {}
            dangling = sorted(dep for dep in deps if dep not in document.services)
            if dangling:
                missing[name] = dangling
        return missing
