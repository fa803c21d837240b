import plotly.express as px
import pandas as pd

def export_hit_rate(timeline, path: str):
    if not timeline:
        with open(path, "w") as f:
            f.write("<h1>Cache Hit Rate</h1><p>No data to display.</p>")
        return

    df = pd.DataFrame(timeline)
    # Ensure numeric types, coercing errors
    df['access_time'] = pd.to_numeric(df['access_time'], errors='coerce')
    df['hit_rate'] = pd.to_numeric(df['hit_rate'], errors='coerce')
    df = df.dropna(subset=['access_time', 'hit_rate'])

    df['outcome'] = df['hit'].map({True: 'HIT', False: 'MISS'})
    df['address_hex'] = df['address'].map(lambda a: f"0x{int(a):X}")

    # Define hover data, checking for column existence
    hover_data_cols = ['address_hex', 'outcome', 'line', 'tag', 'replaced_line']
    existing_hover_cols = [c for c in hover_data_cols if c in df.columns]

    fig = px.line(
        df,
        x="access_time",
        y="hit_rate",
        markers=True,
        hover_data=existing_hover_cols,
        title="Cache Simulation Hit Rate",
        labels={"access_time": "Access", "hit_rate": "Cumulative Hit Rate"}
    )

    fig.update_yaxes(range=[0, 1], tickformat=".0%")
    fig.update_xaxes(range=[0, df['access_time'].max() + 1])
    fig.update_layout(
        height=500,
        font=dict(family="Courier New, monospace", size=12),
    )

    fig.write_html(path, include_plotlyjs="cdn", full_html=True)

def export_cache_lines_ascii(lines, max_rows: int = 64):
    if not lines:
        return "Cache is empty."

    header = f"{'Line':>6} | {'V':^3} | {'Tag':>10} | {'Loaded':>7} | {'Used':>7}"
    chart = "Cache Lines (ASCII)\n"
    chart += header + "\n"
    chart += "-" * len(header) + "\n"

    for line in lines[:max_rows]:
        if line['valid']:
            tag = f"0x{line['tag']:X}"
            loaded = str(line['insertion_time'])
            used = str(line['last_access_time'])
        else:
            tag, loaded, used = "-", "-", "-"
        valid = "1" if line['valid'] else "0"
        chart += f"{line['line']:>6} | {valid:^3} | {tag:>10} | {loaded:>7} | {used:>7}\n"

    if len(lines) > max_rows:
        chart += f"... {len(lines) - max_rows} more lines\n"

    valid_count = sum(1 for line in lines if line['valid'])
    chart += "-" * len(header) + "\n"
    chart += f"{valid_count}/{len(lines)} lines valid\n"

    return chart
