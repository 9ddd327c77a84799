# Editor adapted from Kleber Garcia's GRR (GPU Rasterizer and Renderer)

import coalpy.gpu as g
import numpy as np

from dataclasses import replace
from helixtorus import Camera as c
from helixtorus import Debug
from helixtorus import HelixFactory
from helixtorus import ParticleDeviceMemory
from helixtorus import Simulation


class Editor:

    def __init__(self, deviceMemory: ParticleDeviceMemory.ParticleDeviceMemory, settings: HelixFactory.Settings):
        self.editor_camera = c.Camera(1920, 1080)
        self.frame_it = 0

        # input state
        self.pressed_r = False
        self.pressed_l = False
        self.pressed_t = False
        self.pressed_b = False
        self.pressed_can_move = False

        # camera settings
        self.speed_camera_movement = 0.1
        self.speed_camera_rotation = 0.1
        self.position_mouse_last = (0, 0)

        # simulation
        self.settings = settings
        self.device_memory = deviceMemory
        self.state = None
        self.paused = False
        self.pending_particle_count = settings.particle_count
        self.pending_grid_size = settings.grid_size
        self.rebuild_state()

        # ui panels states
        self.panel_camera     = False
        self.panel_simulation = True

    @property
    def camera(self):
        return self.editor_camera

    def rebuild_state(self):
        self.state = Simulation.create_state(self.settings)
        self.device_memory.layout(self.state.particle_count)
        self.device_memory.bind_particle_data(self.state)

    def apply_settings(self, **changes):
        settings = replace(self.settings, **changes)
        try:
            HelixFactory.validate_settings(settings)
        except ValueError as e:
            print("Rejected settings: {}".format(e))
            return False

        self.settings = settings
        return True

    def update_inputs(self, input_states):
        self.pressed_r = input_states.get_key_state(g.Keys.D)
        self.pressed_l = input_states.get_key_state(g.Keys.A)
        self.pressed_t = input_states.get_key_state(g.Keys.W)
        self.pressed_b = input_states.get_key_state(g.Keys.S)

        prev_mouse = self.pressed_can_move
        self.pressed_can_move = input_states.get_key_state(g.Keys.MouseRight)
        if prev_mouse != self.pressed_can_move:
            m = input_states.get_mouse_position()
            self.position_mouse_last = (m[2], m[3])

    def update_camera(self, w, h, delta_time, input_states):
        self.frame_it = self.frame_it + 1
        self.editor_camera.resize(w, h)
        self.update_inputs(input_states)

        if self.pressed_can_move:
            cam = self.editor_camera
            step = self.speed_camera_movement
            cam.orbit((step if self.pressed_r else 0.0) - (step if self.pressed_l else 0.0), 0.0)
            cam.dolly((step if self.pressed_t else 0.0) - (step if self.pressed_b else 0.0))

            curr_mouse = input_states.get_mouse_position()
            rot_vec = delta_time * self.speed_camera_rotation * np.array([curr_mouse[2] - self.position_mouse_last[0],
                                                                          curr_mouse[3] - self.position_mouse_last[1]])

            cam.orbit(-np.sign(rot_vec[0]) * (np.abs(rot_vec[0]) ** 1.2),
                      np.sign(rot_vec[1]) * (np.abs(rot_vec[1]) ** 1.2))
            self.position_mouse_last = (curr_mouse[2], curr_mouse[3])

    def update_simulation(self, cmd):
        if not self.paused:
            Simulation.update(self.state, self.settings)

        self.device_memory.bind_particle_data(self.state, cmd)

    def render_main_menu_bar(self, imgui: g.ImguiBuilder):
        if imgui.begin_main_menu_bar():
            if imgui.begin_menu("Tools"):
                self.panel_camera = True if imgui.menu_item(label="Camera") else self.panel_camera
                self.panel_simulation = True if imgui.menu_item(label="Simulation") else self.panel_simulation
                imgui.end_menu()
            imgui.end_main_menu_bar()

    def render_camera_bar(self, imgui: g.ImguiBuilder):
        if not self.panel_camera:
            return

        self.panel_camera = imgui.begin("Camera", self.panel_camera)
        if imgui.collapsing_header("params"):
            self.editor_camera.fov = imgui.slider_float(label="fov", v=self.editor_camera.fov, v_min=0.01 * np.pi,
                                                        v_max=0.7 * np.pi)
            self.editor_camera.near = imgui.slider_float(label="near", v=self.editor_camera.near, v_min=0.001,
                                                         v_max=8.0)
            self.editor_camera.far = imgui.slider_float(label="far", v=self.editor_camera.far, v_min=10.0,
                                                        v_max=90000)

        if imgui.collapsing_header("transform"):
            pos = self.editor_camera.pos
            (nx, ny, nz) = imgui.input_float3(label="pos", v=[pos[0], pos[1], pos[2]])
            self.editor_camera.pos = np.array([nx, ny, nz])
            if imgui.button("reset"):
                self.editor_camera.reset()
        imgui.end()

    def render_simulation_bar(self, imgui: g.ImguiBuilder, stats: Debug.Stats):
        if not self.panel_simulation:
            return

        self.panel_simulation = imgui.begin("Settings", self.panel_simulation)

        if imgui.collapsing_header("Helix"):
            s = self.settings
            self.apply_settings(
                helix_radius=imgui.slider_float(" Radius", s.helix_radius, 0.1, 10.0, "%.2f"),
                helix_height=imgui.slider_float(" Height", s.helix_height, 1.0, 200.0, "%.1f"),
                turns=imgui.slider_float(" Turns", s.turns, 0.5, 32.0, "%.1f")
            )

            self.pending_particle_count = int(imgui.slider_float(" Particles", self.pending_particle_count,
                                                                 2, 10000, "%.0f")) // 2 * 2
            self.pending_grid_size = int(imgui.slider_float(" Grid", self.pending_grid_size, 1, 9, "%.0f"))
            if imgui.button("Rebuild"):
                if self.apply_settings(particle_count=max(self.pending_particle_count, 2),
                                       grid_size=self.pending_grid_size):
                    self.rebuild_state()

        if imgui.collapsing_header("Animation"):
            imgui.push_id("A")
            self.paused = imgui.checkbox("Pause", self.paused)
            s = self.settings
            self.apply_settings(
                time_step=imgui.slider_float(" Time Step", s.time_step, 0.0, 0.05, "%.4f"),
                flow_speed=imgui.slider_float(" Flow", s.flow_speed, 0.0, 1.0, "%.3f"),
                base_rotation_speed=imgui.slider_float(" Spin", s.base_rotation_speed, 0.0, 2.0, "%.2f"),
                tilt_angle=imgui.slider_float(" Tilt", s.tilt_angle, 0.0, 1.5, "%.2f")
            )
            imgui.pop_id()

        if imgui.collapsing_header("Glow"):
            s = self.settings
            self.apply_settings(
                glow_speed=imgui.slider_float(" Speed", s.glow_speed, 0.0, 2.0, "%.2f"),
                glow_radius=imgui.slider_float(" Width", s.glow_radius, 0.01, 0.5, "%.2f")
            )

        if imgui.collapsing_header("Stats"):
            imgui.text("Total Particles --------------- " + str(stats.particleCount))
            imgui.text("Visible (Pass / Fail) --------- {} / {}".format(stats.particleCountVisible,
                                                                      stats.particleCount - stats.particleCountVisible))
            imgui.text("Helices ----------------------- " + str(stats.helixCount))
            imgui.text("Time / Zoom ------------------- {:.3f} / {:.2f}".format(stats.time, stats.zoomFactor))

        imgui.end()

    def render(self, stats: Debug.Stats, imgui: g.ImguiBuilder):
        self.render_main_menu_bar(imgui)
        self.render_camera_bar(imgui)
        self.render_simulation_bar(imgui, stats)
