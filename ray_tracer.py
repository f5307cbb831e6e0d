import argparse
import logging
import multiprocessing as mp
import sys
import time

import numpy as np
from PIL import Image

from camera import Camera
from light import DistantLight, Light, PointLight
from matrix44 import Matrix44
from rays import Ray, RayKind
from scene_settings import SceneSettings
from surfaces.disk import Disk
from surfaces.infinite_plane import InfinitePlane
from surfaces.sphere import Sphere
from surfaces.surface import Surface, SurfaceKind
from vectors import clamp, dot, reflect


logger = logging.getLogger(__name__)

# Offset along the normal for secondary ray origins, avoids self-intersection
SHADOW_BIAS = 1e-5

# Fraction of the reflected color kept by reflective surfaces
REFLECTIVITY = 0.6

# Number of numeric fields expected after each scene file tag
SCENE_FIELD_COUNTS = {
    "cam": 7,
    "set": 4,
    "sph": 8,
    "pln": 10,
    "dsk": 11,
    "dlt": 7,
    "plt": 7,
}


def find_nearest_intersection(ray, surfaces):
    """
    Find the nearest surface intersection along the ray.

    Only hits strictly closer than ray.t_max are considered.

    Returns:
        (t, surface) if intersection found
        (None, None) if no intersection
    """
    nearest_t = ray.t_max
    nearest_surface = None

    for surface in surfaces:
        t = surface.intersect(ray)
        if t is not None and t < nearest_t:
            nearest_t = t
            nearest_surface = surface

    if nearest_surface is None:
        return None, None

    return nearest_t, nearest_surface


def compute_direct_lighting(hit_point, normal, surface, surfaces, lights):
    """Lambertian lighting at hit_point, one hard shadow ray per light."""
    color = np.zeros(3)
    shadow_origin = hit_point + normal * SHADOW_BIAS

    for light in lights:
        light_dir, light_intensity, distance = light.shading_info(hit_point)

        shadow_ray = Ray(shadow_origin, -light_dir, t_max=distance, kind=RayKind.SHADOW)
        t, _ = find_nearest_intersection(shadow_ray, surfaces)
        if t is not None:
            continue

        color += surface.albedo * light_intensity * max(0.0, dot(normal, -light_dir))

    return color


def compute_reflection(ray, hit_point, normal, surfaces, lights, scene_settings, depth):
    """Color seen along the mirror direction, scaled by REFLECTIVITY."""
    if depth >= scene_settings.max_depth:
        # The recursive call would stop immediately and return the background
        return REFLECTIVITY * scene_settings.background_color

    reflect_ray = Ray(hit_point + normal * SHADOW_BIAS,
                      reflect(ray.direction, normal),
                      kind=RayKind.REFLECTION)
    reflected = trace_ray(reflect_ray, surfaces, lights, scene_settings, depth + 1)
    return REFLECTIVITY * reflected


def compute_color(ray, hit_point, surface, surfaces, lights, scene_settings, depth):
    """Shade a hit according to the surface kind."""
    normal, _ = surface.surface_data(hit_point)

    if surface.kind is SurfaceKind.REFLECTIVE:
        color = compute_reflection(ray, hit_point, normal, surfaces, lights, scene_settings, depth)
    else:
        color = compute_direct_lighting(hit_point, normal, surface, surfaces, lights)

    return clamp(color)


def trace_ray(ray, surfaces, lights, scene_settings, depth=0):
    """
    Trace a ray through the scene and return its color.

    Recursion past scene_settings.max_depth returns the background color.
    """
    if depth > scene_settings.max_depth:
        return scene_settings.background_color.copy()

    t, surface = find_nearest_intersection(ray, surfaces)

    if surface is None:
        return scene_settings.background_color.copy()

    hit_point = ray.at(t)

    return compute_color(ray, hit_point, surface, surfaces, lights, scene_settings, depth)


def _render_rows(camera, scene_settings, surfaces, lights, y_start, y_end):
    width = scene_settings.width
    height = scene_settings.height
    colors = np.zeros((y_end - y_start, width, 3), dtype=np.float64)

    for y in range(y_start, y_end):
        for x in range(width):
            ray = camera.generate_ray(x, y, width, height)
            colors[y - y_start, x] = trace_ray(ray, surfaces, lights, scene_settings)

    return colors


def render(camera, scene_settings, surfaces, lights):
    """
    Render the scene to an image array of shape (height, width, 3).

    Rows run top to bottom, columns left to right.
    """
    width = scene_settings.width
    height = scene_settings.height
    logger.info("Max depth: %d, %d surfaces, %d lights",
                scene_settings.max_depth, len(surfaces), len(lights))

    image = np.zeros((height, width, 3), dtype=np.float64)
    start_time = time.time()

    for y in range(height):
        image[y:y + 1] = _render_rows(camera, scene_settings, surfaces, lights, y, y + 1)

        # Progress indicator every 10 rows
        if (y + 1) % 10 == 0 or y == height - 1:
            elapsed = time.time() - start_time
            progress = (y + 1) / height
            eta = (elapsed / progress) * (1 - progress)
            logger.info("Row %d/%d (%.1f%%) - ETA: %.0fs", y + 1, height, progress * 100, eta)

    logger.info("Rendering complete in %.1fs", time.time() - start_time)

    return image


def _render_row_chunk(args):
    """
    Worker function to render a chunk of rows.
    Called by multiprocessing pool.

    Args:
        args: tuple of (y_start, y_end, camera, scene_settings, surfaces, lights)

    Returns:
        (y_start, y_end, colors) - the rendered chunk
    """
    y_start, y_end, camera, scene_settings, surfaces, lights = args
    colors = _render_rows(camera, scene_settings, surfaces, lights, y_start, y_end)
    return y_start, y_end, colors


def render_parallel(camera, scene_settings, surfaces, lights, num_workers=None):
    """
    Render the scene using multiprocessing (parallel row-based rendering).

    Rows are split into disjoint chunks; the scene is read-only so workers
    share nothing but their inputs.

    Args:
        num_workers: number of worker processes (default: CPU count)
    """
    if num_workers is None:
        num_workers = mp.cpu_count()

    width = scene_settings.width
    height = scene_settings.height
    start_time = time.time()

    # 4 chunks per worker for load balancing
    rows_per_chunk = max(1, height // (num_workers * 4))
    chunks = []
    for y_start in range(0, height, rows_per_chunk):
        y_end = min(y_start + rows_per_chunk, height)
        chunks.append((y_start, y_end, camera, scene_settings, surfaces, lights))

    logger.info("Parallel rendering %dx%d with %d workers, %d chunks of ~%d rows",
                width, height, num_workers, len(chunks), rows_per_chunk)

    with mp.Pool(num_workers) as pool:
        results = pool.map(_render_row_chunk, chunks)

    image = np.zeros((height, width, 3), dtype=np.float64)
    for y_start, y_end, colors in results:
        image[y_start:y_end] = colors

    logger.info("Parallel rendering complete in %.1fs", time.time() - start_time)

    return image


def save_image(image_array, output_path):
    """Save the rendered image; the format follows the file extension."""
    # Clamp values to [0, 1] then scale to [0, 255]
    image_array = np.clip(image_array, 0, 1)
    image_array = (image_array * 255).astype(np.uint8)

    image = Image.fromarray(image_array)
    image.save(output_path)
    logger.info("Image saved to %s", output_path)


def parse_scene_file(file_path, width=None, height=None):
    """
    Parse the scene file and return camera, settings, and scene objects.

    width and height override the SceneSettings defaults.
    """
    objects = []
    camera = None
    background_color = (0.0, 0.0, 0.0)
    max_depth = SceneSettings.max_depth

    with open(file_path, 'r') as f:
        for line_number, line in enumerate(f, start=1):
            line = line.strip()
            if not line or line.startswith("#"):
                continue
            parts = line.split()
            obj_type = parts[0]

            if obj_type not in SCENE_FIELD_COUNTS:
                raise ValueError("Unknown object type: {} (line {})".format(obj_type, line_number))
            if len(parts) - 1 != SCENE_FIELD_COUNTS[obj_type]:
                raise ValueError("Expected {} values for '{}', got {} (line {})".format(
                    SCENE_FIELD_COUNTS[obj_type], obj_type, len(parts) - 1, line_number))
            params = [float(p) for p in parts[1:]]

            if obj_type == "cam":
                camera = Camera.look_at(params[:3], params[3:6], np.radians(params[6]))
            elif obj_type == "set":
                background_color = params[:3]
                max_depth = int(params[3])
            elif obj_type == "sph":
                objects.append(Sphere(params[:3], params[3], params[4:7], int(params[7])))
            elif obj_type == "pln":
                objects.append(InfinitePlane(params[:3], params[3:6], params[6:9], int(params[9])))
            elif obj_type == "dsk":
                objects.append(Disk(params[:3], params[3:6], params[6], params[7:10], int(params[10])))
            elif obj_type == "dlt":
                rx, ry, rz = np.radians(params[:3])
                light_to_world = Matrix44.rotate_x(rx) * Matrix44.rotate_y(ry) * Matrix44.rotate_z(rz)
                objects.append(DistantLight(light_to_world, params[3:6], params[6]))
            elif obj_type == "plt":
                objects.append(PointLight(Matrix44.translate(*params[:3]), params[3:6], params[6]))

    if camera is None:
        raise ValueError("Scene file {} has no camera ('cam') line".format(file_path))

    size = {}
    if width is not None:
        size['width'] = width
    if height is not None:
        size['height'] = height
    scene_settings = SceneSettings(max_depth=max_depth, background_color=background_color, **size)

    return camera, scene_settings, objects


def separate_objects(objects):
    """Separate parsed objects into surfaces and lights."""
    surfaces = []
    lights = []

    for obj in objects:
        if isinstance(obj, Light):
            lights.append(obj)
        elif isinstance(obj, Surface):
            surfaces.append(obj)

    return surfaces, lights


def main(argv=None):
    parser = argparse.ArgumentParser(description='Python Ray Tracer')
    parser.add_argument('scene_file', type=str, help='Path to the scene file')
    parser.add_argument('output_image', type=str, help='Name of the output image file')
    parser.add_argument('--width', type=int, default=500, help='Image width')
    parser.add_argument('--height', type=int, default=500, help='Image height')
    parser.add_argument('--sequential', action='store_true',
                        help='Use the single-process renderer')
    parser.add_argument('--workers', type=int, default=None,
                        help='Number of worker processes (default: CPU count)')
    parser.add_argument('--log-level', type=str, default='INFO',
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
                        help='Logging verbosity')
    args = parser.parse_args(argv)

    logging.basicConfig(level=getattr(logging, args.log_level),
                        format='%(asctime)s %(name)s %(levelname)s: %(message)s',
                        stream=sys.stdout)

    # Parse the scene file
    camera, scene_settings, objects = parse_scene_file(args.scene_file, args.width, args.height)

    # Separate objects into surfaces and lights
    surfaces, lights = separate_objects(objects)

    logger.info("Scene loaded: %d surfaces, %d lights", len(surfaces), len(lights))
    logger.info("Rendering %dx%d image...", scene_settings.width, scene_settings.height)

    if args.sequential:
        image_array = render(camera, scene_settings, surfaces, lights)
    else:
        image_array = render_parallel(camera, scene_settings, surfaces, lights, args.workers)

    # Save the output image
    save_image(image_array, args.output_image)


if __name__ == '__main__':
    main()
