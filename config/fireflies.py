"""Configuration for the fireflies flocking simulation."""

WINDOW = {
    "width": 1280,
    "height": 720,
    "title": "Fireflies",
    "fps": 60,
}

CAMERA = {
    "fov": 70.0,
    "near_clip": 0.1,
    "far_clip": 600.0,
    "initial_radius": 110.0,
    "initial_theta": 45.0,
    "initial_phi": 20.0,
    "min_radius": 10.0,
    "max_radius": 400.0,
    "min_phi": -89.0,
    "max_phi": 89.0,
    "keyboard_rotate_speed": 60.0,
    "keyboard_zoom_speed": 40.0,
    "mouse_sensitivity": 0.3,
    "zoom_smoothing": 8.0,
}

# Containment volume. Size is (diameter_x, height, diameter_z); the cylinder
# radius is half of the smaller horizontal extent.
VOLUME = {
    "position": (0.0, 20.0, 0.0),
    "size": (60.0, 40.0, 60.0),
    "transition_distance": 5.0,    # Width of the edge fade zone
    "segments": 48,                # Wireframe ring resolution
    "color": (0.15, 0.15, 0.22),
}

FLOCK = {
    "num_leaders": 5,
    "max_participants": 50,
    "changeup_cooldown": 10.0,     # Seconds between leadership reshuffles
    "changeup_min": 3,
    "changeup_max": 15,
    "assign_saturation": 0.7,      # Follower tint when first assigned a leader
    "mode_saturation": 0.8,        # Follower tint when the color mode is reselected
}

STEERING = {
    "check_range": 20.0,           # Neighbour perception distance
    "avoid_radius": 5.0,           # Separation kicks in inside this distance
    "separation_weight": 0.4,
    "alignment_weight": 0.3,
    "cohesion_weight": 1.0,
    "leader_wander": 100.0,        # Random-walk bias applied to leader heading
}

SIMULATION = {
    "max_speed": 15.0,
    "min_speed": 0.1,
    "max_dt": 0.05,                # Cap dt to prevent physics explosion on lag
    "headless_dt": 1.0 / 30.0,
    "color_mode": "leader",
    "rainbow_speed": 0.1,          # Hue cycles per second
}

SPAWN = {
    "interval": 0.25,              # Seconds between admissions
}

FIREFLY = {
    "point_size": 6.0,
}

COLORS = {
    "background": (0.01, 0.01, 0.03, 1.0),
    "text": (230, 230, 230),
    "prompt": (255, 220, 120),
}
