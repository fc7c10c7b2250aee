"""Input synthesis and pointer injection."""
from .injectors import PathInjector, SimulatedInjector, XdotoolInjector, create_injector
from .input_synthesizer import InputSynthesizer, InputSynthesizerConfig

__all__ = [
    "InputSynthesizer",
    "InputSynthesizerConfig",
    "PathInjector",
    "SimulatedInjector",
    "XdotoolInjector",
    "create_injector",
]
