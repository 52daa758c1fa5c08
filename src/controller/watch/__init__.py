"""Watch bounded context.

Translates change events on watched objects into work items for the
tenant reconciler: dependent objects wake up their owners, and template
changes wake up the tenants that request the template's module.
"""
