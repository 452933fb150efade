import logging
import numpy as np
import matplotlib.pyplot as plt
from mpl_toolkits.mplot3d.art3d import Line3DCollection

from turtle_state import Point, Arrow, ARROW_COLOR

logger = logging.getLogger(__name__)

GROUND_SIZE = 4.0
GROUND_COLOR = '#00ff00'
BRANCH_COLOR = '#8b4513'

# turtle space is +Y up, matplotlib 3D is +Z up
def _to_plot(p):
    p = np.asarray(p, dtype=float)
    return p[..., [0, 2, 1]]

def _draw_ground(ax):

    h = GROUND_SIZE / 2
    xx, yy = np.meshgrid([-h, h], [-h, h])

    ax.plot_surface(xx, yy, np.zeros_like(xx), color=GROUND_COLOR,
                    alpha=0.3, linewidth=0)

def _finish(ax, pts, image_filename):

    if len(pts):
        lo = pts.min(axis=0)
        hi = pts.max(axis=0)
        center = 0.5 * (lo + hi)
        r = max(0.5 * (hi - lo).max(), GROUND_SIZE / 2)
        ax.set_xlim(center[0] - r, center[0] + r)
        ax.set_ylim(center[1] - r, center[1] + r)
        ax.set_zlim(0, 2 * r)

    ax.set_axis_off()

    plt.savefig(image_filename)
    plt.close(ax.figure)

    print('wrote {}'.format(image_filename))

def plot_segments(segments, image_filename='segment_plot.png'):

    assert len(segments.shape) == 3 and segments.shape[1:] == (2, 3)

    fig = plt.figure()
    ax = fig.add_subplot(projection='3d')

    _draw_ground(ax)

    ax.add_collection3d(Line3DCollection(_to_plot(segments),
                                         colors=BRANCH_COLOR))

    _finish(ax, _to_plot(segments.reshape(-1, 3)), image_filename)

def plot_events(events, image_filename='foliage.png'):

    fig = plt.figure()
    ax = fig.add_subplot(projection='3d')

    _draw_ground(ax)

    segments = [ [e.origin, e.origin + e.direction * e.length]
                 for e in events if isinstance(e, Arrow) ]

    if segments:
        ax.add_collection3d(Line3DCollection(_to_plot(segments),
                                             colors=ARROW_COLOR))

    points = [ e for e in events if isinstance(e, Point) ]

    pts = np.zeros((0, 3))

    if points:
        pts = _to_plot([ p.position for p in points ])
        ax.scatter(pts[:, 0], pts[:, 1], pts[:, 2], s=2,
                   c=[ p.color for p in points ], depthshade=False)

    logger.debug('plotting %d segments and %d points',
                 len(segments), len(points))

    _finish(ax, pts, image_filename)


if __name__ == '__main__':

    segments = np.genfromtxt('segments.txt').reshape(-1, 2, 3)

    plot_segments(segments)
