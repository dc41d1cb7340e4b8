# main.py
"""
Main entry point for the particle field.

This script orchestrates the whole lifecycle:
1. Loads configuration from `config.json`.
2. Initializes the logging system.
3. Opens the host window and starts the particle field engine on it.
4. Runs the display loop until the window is closed or max_frames is hit.
5. Handles clean shutdown.
"""
import logging
from utils import setup_logging, load_config, FieldConfig
import cProfile
import pstats
import io

def main():
    """
    The main function to run the particle field.
    """
    # Logging is not set up yet, so we use a print for this one error.
    try:
        config = load_config('config.json')
    except Exception as e:
        print(f"FATAL: Could not load config.json. Error: {e}")
        return

    setup_logging(config)

    logging.info("--- Particle Field Starting ---")

    field_config = FieldConfig.from_dict(config.get('particle_field', {}))
    run_params = config.get('run_control', {})
    window_params = config.get('window', {})

    from host import PygameHost
    from engine import start_particle_field

    # --- Component Initialization ---
    # The host owns the window, the frame clock and resize notifications.
    host = PygameHost(window_params)
    engine = start_particle_field(host.canvas, field_config, frames=host, resize_events=host)
    if engine is None:
        logging.warning("Particle field did not start; showing the bare background.")

    profiler = cProfile.Profile() if run_params.get('profile', False) else None

    log_throttle = run_params.get('log_throttle_frames', 300)
    max_frames = run_params.get('max_frames', 0)

    running = True
    tick_num = 0

    if profiler is not None:
        profiler.enable()
    while running:
        if not host.tick():
            running = False
        tick_num += 1

        # Hot loops must throttle logs
        if tick_num % log_throttle == 0:
            logging.info(f"Frame {tick_num}" + (f"/{max_frames}" if max_frames else ""))
            if engine is not None:
                logging.debug(
                    f"Frame {tick_num} | Particles: {engine.particle_count}, "
                    f"Links: {engine.last_link_count}, FPS: {host.clock.get_fps():.1f}"
                )

        if max_frames and tick_num >= max_frames:
            logging.info(f"Reached max_frames ({max_frames}). Stopping.")
            running = False
    if profiler is not None:
        profiler.disable()

    if engine is not None:
        engine.stop()
    host.close()
    logging.info("Display loop finished.")

    if profiler is not None:
        logging.info("--- Performance Profile ---")
        s = io.StringIO()
        # Sort by cumulative time spent in the function
        stats = pstats.Stats(profiler, stream=s).sort_stats('cumtime')
        stats.print_stats(20) # Print top 20 slowest functions
        logging.info(f"\n{s.getvalue()}")

    logging.info("--- Particle Field Shutting Down ---")


if __name__ == "__main__":
    main()
