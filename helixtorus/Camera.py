import math
import numpy as np

from helixtorus import Utility

BIRDS_EYE_POSITION = (0.0, 8.0, 0.0)
WORLD_UP = (0.0, 1.0, 0.0)

# Up vector used when looking straight along WORLD_UP.
FALLBACK_UP = (0.0, 0.0, -1.0)


def look_at(eye, target, up=WORLD_UP) -> np.ndarray:
    eye = np.asarray(eye, dtype=np.float64)
    f = Utility.normalize(np.asarray(target, dtype=np.float64) - eye)

    s = np.cross(f, np.asarray(up, dtype=np.float64))
    if np.dot(s, s) < 1e-12:
        s = np.cross(f, np.asarray(FALLBACK_UP, dtype=np.float64))
    s = Utility.normalize(s)
    u = np.cross(s, f)

    m = np.identity(4)
    m[0, 0:3] = s
    m[1, 0:3] = u
    m[2, 0:3] = -f
    m[0, 3] = -np.dot(s, eye)
    m[1, 3] = -np.dot(u, eye)
    m[2, 3] = np.dot(f, eye)
    return m


def perspective(fov, aspect, near, far) -> np.ndarray:
    f = 1.0 / math.tan(0.5 * fov)
    m = np.zeros((4, 4))
    m[0, 0] = f / aspect
    m[1, 1] = f
    m[2, 2] = (far + near) / (near - far)
    m[2, 3] = (2.0 * far * near) / (near - far)
    m[3, 2] = -1.0
    return m


class Camera:

    def __init__(self, w, h):
        self.w = w
        self.h = h
        self.fov = math.radians(75.0)
        self.near = 0.1
        self.far = 10000.0
        self.pos = np.array(BIRDS_EYE_POSITION)
        self.target = np.zeros(3)

    @property
    def aspect(self):
        return self.w / max(self.h, 1)

    @property
    def view_matrix(self):
        return look_at(self.pos, self.target)

    @property
    def proj_matrix(self):
        return perspective(self.fov, self.aspect, self.near, self.far)

    def resize(self, w, h):
        self.w = w
        self.h = h

    def reset(self):
        self.pos = np.array(BIRDS_EYE_POSITION)
        self.target = np.zeros(3)

    def orbit(self, d_yaw, d_pitch):
        offset = self.pos - self.target
        distance = np.linalg.norm(offset)

        yaw = math.atan2(offset[0], offset[2]) + d_yaw
        pitch = math.asin(Utility.clamp(offset[1] / distance, -1.0, 1.0)) + d_pitch
        pitch = Utility.clamp(pitch, -0.5 * math.pi, 0.5 * math.pi)

        self.pos = self.target + distance * np.array([
            math.cos(pitch) * math.sin(yaw),
            math.sin(pitch),
            math.cos(pitch) * math.cos(yaw)
        ])

    def dolly(self, amount):
        offset = self.pos - self.target
        distance = np.linalg.norm(offset)
        new_distance = max(distance - amount, self.near)
        self.pos = self.target + offset * (new_distance / distance)
