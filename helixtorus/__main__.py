import argparse
import coalpy.gpu as gpu

from helixtorus import Debug
from helixtorus import Device
from helixtorus import Editor
from helixtorus import HelixFactory
from helixtorus import ParticleDeviceMemory
from helixtorus import ParticleRasterizer


def parse_args(argv=None):
    parser = argparse.ArgumentParser(prog="helixtorus", description="Double helix particles wrapped around a torus.")
    parser.add_argument("--particles", type=int, default=HelixFactory.Settings.particle_count,
                        help="particles per helix, must be even")
    parser.add_argument("--grid", type=int, default=HelixFactory.Settings.grid_size,
                        help="helices per side of the square grid")
    parser.add_argument("--width", type=int, default=1280)
    parser.add_argument("--height", type=int, default=720)
    parser.add_argument("--adapter", type=int, default=0, help="GPU adapter index")
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)

    settings = HelixFactory.Settings(particle_count=args.particles, grid_size=args.grid)
    HelixFactory.validate_settings(settings)

    Device.select_adapter(args.adapter)

    print("Particles: {} x {} helices = {}".format(
        settings.particle_count, settings.grid_size * settings.grid_size,
        HelixFactory.total_particle_count(settings)))

    # Allocate a chunk of device memory resources
    device_memory = ParticleDeviceMemory.ParticleDeviceMemory()

    # Create the rasterizer, allocating internal resources.
    rasterizer = ParticleRasterizer.ParticleRasterizer(args.width, args.height)

    # Create the debugger
    debug = Debug.Debug()

    editor = Editor.Editor(device_memory, settings)

    def on_render(render_args: gpu.RenderArgs):
        output_target = render_args.window.display_texture

        w = render_args.width
        h = render_args.height

        # Process user input and interface
        editor.update_camera(w, h, render_args.delta_time, render_args.window)

        cmd = gpu.CommandList()

        # Advance the simulation and upload this frame's particles.
        editor.update_simulation(cmd)

        # Clear the color target.
        cmd.begin_marker("ClearColorTarget")
        Device.clear_target(
            cmd,
            [0.0, 0.0, 0.0, 0.0],
            output_target, w, h
        )
        cmd.end_marker()

        # Create the new frame context.
        context = ParticleRasterizer.Context(
            cmd, w, h,
            editor.camera.view_matrix,
            editor.camera.proj_matrix,
            device_memory,
            editor.state.particle_count,
            output_target
        )

        # Invoke the particle rasterizer.
        rasterizer.go(context)

        # Crunch some numbers about the rasterizer for this frame.
        stats = debug.compute_stats(rasterizer, context, editor.state)

        editor.render(stats, render_args.imgui)

        # Schedule the work.
        gpu.schedule(cmd)

    # Invoke the window creation and register our render loop.
    window = gpu.Window("HelixTorus", args.width, args.height, on_render)

    gpu.run()


if __name__ == "__main__":
    main()
