import matplotlib.pyplot as plt

from .config import GeometryParams


def show_sample(data, label, item=0, params=None, show=True):
    """Displays the scale pyramid of one item with its confidence maps."""
    params = params if params is not None else GeometryParams()
    num_scales = params.scale_step_num
    template_w, template_h = params.template_size

    fig, axs = plt.subplots(2, num_scales, figsize=(3 * num_scales, 6), squeeze=False)
    for s in params.scale_indices:
        rank = params.scale_rank(s)
        index = item * num_scales + rank
        crop = data[index].permute(1, 2, 0).cpu().numpy()
        confidence = label[index, 0].cpu().numpy()

        # template corner sits on the heatmap peak
        row, col = divmod(int(confidence.argmax()), confidence.shape[1])
        axs[0, rank].imshow(crop.squeeze(-1) if crop.shape[-1] == 1 else crop, cmap="gray")
        axs[0, rank].add_patch(plt.Rectangle((col, row), template_w, template_h,
                                             edgecolor='g', facecolor='none', linewidth=2))
        axs[0, rank].set_title(f"Scale {s}")
        axs[1, rank].imshow(confidence, cmap="hot")
        axs[1, rank].set_title(f"Peak {confidence.max():.3f}")
    for ax in axs.flat:
        ax.axis('off')
    plt.tight_layout()
    if show:
        plt.show()
    return fig
