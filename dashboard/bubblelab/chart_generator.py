# bubblelab/chart_generator.py - Plotly bubble figure and Altair crime charts
import re

import altair as alt
import pandas as pd
import plotly.graph_objects as go

from bubblelab.config import LayoutConfig


UNKNOWN_REGION_COLOR = '#cccccc'


def add_commas(value):
    """Insert thousands separators into the integer part of a number or numeric string."""
    text = str(value)
    parts = text.split('.')
    whole = parts[0]
    fraction = '.' + parts[1] if len(parts) > 1 else ''
    pattern = re.compile(r'(\d+)(\d{3})')
    while pattern.search(whole):
        whole = pattern.sub(r'\1,\2', whole, count=1)
    return whole + fraction


def format_amount(value):
    """Drop a trailing ``.0`` so whole amounts read like the source data."""
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return add_commas(value)


def darker(hex_color, k=1.0):
    """Darken a ``#rrggbb`` color by ``0.7 ** k`` per channel."""
    hex_color = hex_color.lstrip('#')
    factor = 0.7 ** k
    channels = [int(hex_color[i:i + 2], 16) for i in (0, 2, 4)]
    return '#' + ''.join(f'{max(0, min(255, round(c * factor))):02x}' for c in channels)


def tooltip_html(node):
    """Hover content for one bubble."""
    return (
        f'<span class="name">Country: </span><span class="value">{node.name}</span><br>'
        f'<span class="name">Amount: </span><span class="value">${format_amount(node.value)} million</span><br>'
        f'<span class="name">Year: </span><span class="value">{node.year}</span>'
    )


class BubbleSurface:
    """
    Drawing surface the layout engine renders into.

    Each ``draw`` call records a frame of node positions; the figure builder
    replays those frames as an animation. Only every ``frame_every``-th draw
    after the first is kept.
    """

    def __init__(self, frame_every=1):
        self.frame_every = max(1, int(frame_every))
        self.frames = []
        self.labels = {}
        self._draws = 0

    def clear(self):
        self.frames = []
        self.labels = {}
        self._draws = 0

    def draw(self, nodes):
        if self._draws % self.frame_every == 0:
            self.frames.append({n.id: (n.x, n.y) for n in nodes})
        self._draws += 1

    def show_labels(self, labels):
        self.labels = dict(labels)

    def hide_labels(self):
        self.labels = {}

    def restart_frames(self, nodes):
        """Begin a new animation from the current positions (after a mode toggle)."""
        self.frames = []
        self._draws = 0
        self.draw(nodes)


def _bubble_trace(nodes, positions, colors):
    fills = [colors.get(n.category, UNKNOWN_REGION_COLOR) for n in nodes]
    return go.Scatter(
        x=[positions[n.id][0] for n in nodes],
        y=[positions[n.id][1] for n in nodes],
        mode='markers',
        marker=dict(
            size=[2 * n.radius for n in nodes],
            sizemode='diameter',
            color=fills,
            line=dict(color=[darker(c) for c in fills], width=2),
            opacity=1.0,
        ),
        customdata=[n.id for n in nodes],
        hovertext=[tooltip_html(n) for n in nodes],
        hoverinfo='text',
        hoverlabel=dict(bgcolor='white', font=dict(color='#333333', size=12)),
        showlegend=False,
    )


def create_bubble_figure(surface, nodes, config=None, title=None, frame_duration=30):
    """
    Build the bubble chart figure from a rendered surface.

    Args:
        surface: BubbleSurface holding recorded frames and visible labels
        nodes: Current nodes (their positions are the settled layout)
        config: LayoutConfig for canvas size and colors
        title: Optional figure title
        frame_duration: Milliseconds per animation frame

    Returns:
        Plotly figure whose base data is the settled layout, with a Play
        button replaying the recorded frames.
    """
    config = config or LayoutConfig()
    colors = config.region_colors
    current = {n.id: (n.x, n.y) for n in nodes}

    fig = go.Figure(data=[_bubble_trace(nodes, current, colors)])

    if nodes and surface.frames:
        fig.frames = [
            go.Frame(data=[_bubble_trace(nodes, positions, colors)], name=str(i))
            for i, positions in enumerate(surface.frames)
            if all(n.id in positions for n in nodes)
        ]
        fig.update_layout(
            updatemenus=[dict(
                type='buttons',
                showactive=False,
                x=0.0,
                y=1.0,
                xanchor='left',
                yanchor='top',
                buttons=[dict(
                    label='▶ Replay',
                    method='animate',
                    args=[None, dict(
                        frame=dict(duration=frame_duration, redraw=False),
                        transition=dict(duration=0),
                        fromcurrent=False,
                        mode='immediate',
                    )],
                )],
            )]
        )

    for name, point in surface.labels.items():
        fig.add_annotation(
            x=point.x,
            y=point.y,
            text=f'<b>{name}</b>',
            showarrow=False,
            font=dict(size=16, color='#444444'),
            xanchor='center',
        )

    fig.update_layout(
        template='plotly_white',
        width=int(config.width),
        height=int(config.height),
        margin=dict(l=0, r=0, t=40 if title else 0, b=0),
        title=title,
        xaxis=dict(range=[0, config.width], visible=False, fixedrange=True),
        yaxis=dict(range=[config.height, 0], visible=False, fixedrange=True),
        hovermode='closest',
    )
    return fig


def create_crime_category_chart(crime_df, categories, min_year=None, max_year=None):
    """
    Create a line chart of yearly counts for the selected crime categories.

    Args:
        crime_df: DataFrame with columns year, category, count
        categories: Category names to include
        min_year: Minimum year to display
        max_year: Maximum year to display

    Returns:
        Altair chart object
    """
    chart_data = crime_df[crime_df['category'].isin(list(categories))].copy()

    if min_year is None and len(crime_df) > 0:
        min_year = int(crime_df['year'].min())
    if max_year is None and len(crime_df) > 0:
        max_year = int(crime_df['year'].max())

    if min_year is not None and max_year is not None:
        chart_data = chart_data[(chart_data['year'] >= min_year) & (chart_data['year'] <= max_year)]

    chart_data = chart_data.groupby(['year', 'category'], as_index=False)['count'].sum()
    chart_data['year'] = chart_data['year'].astype(int)
    chart_data = chart_data.sort_values(['category', 'year']).reset_index(drop=True)

    # Handle empty data
    if len(chart_data) == 0:
        chart_data = pd.DataFrame({'year': [min_year or 0], 'category': ['No selection'], 'count': [0]})

    line = alt.Chart(chart_data).mark_line(
        strokeWidth=2.5
    ).encode(
        x=alt.X('year:Q',
                title='Year',
                axis=alt.Axis(format='d', tickCount=10, labelAngle=-45)),
        y=alt.Y('count:Q',
                title='Reported Incidents',
                scale=alt.Scale(zero=True)),
        color=alt.Color('category:N', legend=alt.Legend(title='Category', orient='top'))
    )

    points = alt.Chart(chart_data).mark_circle(size=40).encode(
        x=alt.X('year:Q'),
        y=alt.Y('count:Q'),
        color=alt.Color('category:N', legend=None),
        tooltip=[
            alt.Tooltip('year:Q', title='Year', format='d'),
            alt.Tooltip('category:N', title='Category'),
            alt.Tooltip('count:Q', title='Incidents', format=',')
        ]
    )

    chart = (line + points).properties(
        title=alt.Title(text='Reported Incidents by Category', fontSize=16, anchor='start'),
        width='container',
        height=350
    ).configure_view(
        strokeWidth=0
    ).configure_axis(
        grid=True,
        gridOpacity=0.3,
        labelFontSize=11,
        titleFontSize=13
    )

    return chart
