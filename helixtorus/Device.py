import math
import os
import coalpy.gpu as gpu

from enum import Enum

root = os.path.dirname(os.path.abspath(__file__))


def select_adapter(adapter_index=0):
    print("Devices:")
    [print("{}: {}".format(idx, nm)) for (idx, nm) in gpu.get_adapters()]

    settings_obj = gpu.get_settings()
    settings_obj.adapter_index = adapter_index
    print("Using adapter {}".format(adapter_index))

    gpu.add_data_path("{}/shaders/".format(root))


class ClearMode(Enum):
    RAW    = 0
    UINT   = 1


# Shaders compile lazily, after the data path is registered.
_clear_shaders = {}


def _shader(key, file, name, main_function):
    if key not in _clear_shaders:
        _clear_shaders[key] = gpu.Shader(file=file, name=name, main_function=main_function)
    return _clear_shaders[key]


def clear_target(cmd, color, target, w, h):
    cmd.dispatch(
        shader=_shader("target", "utility/ClearTarget.hlsl", "ClearTarget", "ClearTarget"),
        constants=color,
        x=math.ceil(w / 8),
        y=math.ceil(h / 8),
        z=1,
        outputs=target
    )


def clear_buffer(cmd, value, count, target, mode=ClearMode.UINT):
    if mode is ClearMode.RAW:
        shader = _shader(mode, "utility/ClearBufferRaw.hlsl", "ClearBufferRaw", "ClearBuffer")
    else:
        shader = _shader(mode, "utility/ClearBufferUInt.hlsl", "ClearBufferUInt", "ClearBuffer")

    cmd.dispatch(
        shader=shader,

        constants=[
            int(value),
            int(count)
        ],

        outputs=target,

        x=math.ceil(count / 64),
        y=1,
        z=1
    )
