# matchina/interfaces/types.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details
from typing import Any, Callable, Optional

StateKey = str
EventType = str

# Callback Types
Disposer = Callable[[], None]
Listener = Callable[[Any], Optional[Callable[[], None]]]
GuardFunc = Callable[[Any], bool]
EffectFunc = Callable[[Any], None]
NextFunc = Callable[[Any], None]
Middleware = Callable[[Any, NextFunc], None]
Installer = Callable[[Any], Disposer]
