"""
Kubernetes Actions - kubectl-backed cluster mutations over HTTP

Creates, exposes, labels, lists and deletes Kubernetes resources by running
kubectl as a child process, and offers template actions for scaffolding.

Architecture:
- Each module is self-contained with clear interfaces
- All kubectl arguments are built in one place (commands)
- Only the executor touches processes

Modules:
- commands: Mutation request -> kubectl argument templates
- executor: Child process execution with timeouts
- resources: kubectl list output parsing
- orchestrator: Multi-step sequencing and outcome classification
- api: HTTP models and action translation
- scaffolder: Template actions (apply, delete, pod)
- config: Environment-based configuration
"""

__version__ = "1.0.0"
