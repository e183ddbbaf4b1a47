"""ViewModel package for UI state and command surfaces.

Call context:
    ``loginbus/app/main.py`` and ``loginbus/app/controller.py`` import the
    concrete viewmodels from this package to bind screen actions to the
    controller bus.

Dependencies:
    Modules in this package depend on domain types and ports only. Transport
    and persistence stay in the adapter layer.

Responsibilities:
    - Forward button actions to the injected controller.
    - Map bus notifications to alert descriptions.
    - Hold and validate connection settings.
"""
