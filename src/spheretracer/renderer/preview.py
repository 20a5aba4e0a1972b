# renderer/preview.py
import numpy as np

def to_surface_array(pixels: np.ndarray) -> np.ndarray:
    """
    pygame surfaces index pixels as [x, y]; images here are [row, column].
    """
    return np.ascontiguousarray(np.transpose(pixels, (1, 0, 2)))

def show_image(pixels: np.ndarray, title: str = "spheretracer") -> None:
    """
    Opens a window with the rendered image and blocks until it is closed
    or Escape is pressed.
    """
    import pygame

    height, width = pixels.shape[:2]
    pygame.init()
    try:
        screen = pygame.display.set_mode((width, height))
        pygame.display.set_caption(title)
        surface = pygame.surfarray.make_surface(to_surface_array(pixels))
        screen.blit(surface, (0, 0))
        pygame.display.flip()

        clock = pygame.time.Clock()
        running = True
        while running:
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    running = False
                elif event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE:
                    running = False
            clock.tick(30)
    finally:
        pygame.quit()
