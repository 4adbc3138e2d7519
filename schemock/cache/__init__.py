# -*- coding: utf-8 -*-
"""Location: ./schemock/cache/__init__.py
Copyright 2025
SPDX-License-Identifier: Apache-2.0

Cache Package.
Provides the bounded LRU/TTL cache of generated values.
"""
