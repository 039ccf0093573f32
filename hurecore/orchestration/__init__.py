"""
Orchestration Layer - Workflow Coordination

Composes rules storage, payroll calculation and export into a payroll run.
- No business logic
"""
