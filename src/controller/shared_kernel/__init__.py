"""Shared Kernel module.

This module contains foundational components that are explicitly shared
between the template resolution and watch contexts: object metadata,
ownership references, and the work items both contexts hand to the
reconciler's queue. Changes here affect both contexts and should be
carefully coordinated.
"""
