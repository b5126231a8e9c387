from django import template

register = template.Library()


@register.filter
def is_winning_cell(cell, pattern):
    if pattern is None:
        return False
    return (cell.row, cell.col) in pattern.positions


@register.filter
def cell_classes(cell, pattern=None):
    classes = ['bingo-cell']
    if cell.is_free:
        classes.append('free')
    if cell.marked:
        classes.append('marked')
    if is_winning_cell(cell, pattern):
        classes.append('winning')
    return ' '.join(classes)


@register.filter
def duration(seconds):
    """mm:ss"""
    try:
        seconds = int(seconds)
    except (TypeError, ValueError):
        return ''
    return f"{seconds // 60}:{seconds % 60:02d}"
