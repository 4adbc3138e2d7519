# -*- coding: utf-8 -*-
"""Location: ./schemock/services/__init__.py
Copyright 2025
SPDX-License-Identifier: Apache-2.0

Services Package.
Value generation, validation, resource state, route tables, scenarios and
the per-server service that ties them together.
"""
