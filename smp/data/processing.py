"""
This module converts SMP instances and solutions into pandas DataFrames and exports a solved instance to an Excel
workbook.

Sheets written by `export_solution_results_excel`
-------------------------------------------------
- Main: overall metrics and the plain-text summary
- Matching: one row per group A participant with partner, ranks and blocking pair counts
- Preferences A / Preferences B: the preference tables, one column per choice
- Blocking Pairs: every blocking pair of the matching
- Suggestions: the proposed swaps and their estimated deltas

The workbook is a report only; nothing in `smp` reads it back.
"""
import os
import pandas as pd

# smp modules
import smp.data.preferences


def preferences_to_dataframe(prefs):
    """
    One row per participant and one column per choice ("Choice 1", "Choice 2", ...)
    """
    n = max([len(ranking) for ranking in prefs.values()], default=0)
    df = pd.DataFrame([list(ranking) for ranking in prefs.values()], index=list(prefs.keys()),
                      columns=['Choice ' + str(c + 1) for c in range(n)])
    df.index.name = 'Participant'
    return df


def matching_to_dataframe(matching, prefs_a, prefs_b, blocking_pair_counts=None):
    """
    One row per group A participant with its partner and the rank each of them gives the other (1-based)
    """
    rows = []
    for a in prefs_a:
        b = matching.get(a)
        row = {'A': a, 'B': b,
               'A Rank of B': smp.data.preferences.get_rank(a, b, prefs_a) + 1 if b is not None else None,
               'B Rank of A': smp.data.preferences.get_rank(b, a, prefs_b) + 1 if b is not None else None}
        if blocking_pair_counts is not None:
            row['A Blocking Pairs'] = blocking_pair_counts.get(a, 0)
            row['B Blocking Pairs'] = blocking_pair_counts.get(b, 0) if b is not None else None
        rows.append(row)
    return pd.DataFrame(rows)


def blocking_pairs_to_dataframe(blocking_pairs):
    return pd.DataFrame({'Blocking A': [pair[0] for pair in blocking_pairs],
                         'Blocking B': [pair[1] for pair in blocking_pairs]})


def metrics_to_dataframe(metrics):
    """
    Scalar metrics as a two-column ("Metric", "Value") table
    """
    name_metric_dict = {'Stability Score': 'stability_score', 'Blocking Pairs': 'num_blocking_pairs',
                        'Unmatched Participants': 'num_unmatched',
                        'Average Satisfaction': 'avg_happiness',
                        'Group A Average Happiness (Rank)': 'avg_a_happiness',
                        'Group B Average Happiness (Rank)': 'avg_b_happiness',
                        'Group A Satisfaction': 'avg_a_satisfaction', 'Group B Satisfaction': 'avg_b_satisfaction',
                        'Proposer Satisfaction': 'proposer_satisfaction',
                        'Receiver Satisfaction': 'receiver_satisfaction'}
    names = [name for name in name_metric_dict if name_metric_dict[name] in metrics]
    return pd.DataFrame({'Metric': names, 'Value': [metrics[name_metric_dict[name]] for name in names]})


def suggestions_to_dataframe(suggestions):
    rows = []
    for s in suggestions:
        rows.append({'Target': s['target'], 'Action': s['action'], 'Index 1': s['indices'][0],
                     'Index 2': s['indices'][1], 'Rationale': s['rationale'],
                     'Stability Delta': s['expected_delta']['stability'],
                     'Happiness Delta': s['expected_delta']['avg_happiness'],
                     'Estimated': s.get('estimated', True)})
    return pd.DataFrame(rows, columns=['Target', 'Action', 'Index 1', 'Index 2', 'Rationale', 'Stability Delta',
                                       'Happiness Delta', 'Estimated'])


def export_solution_results_excel(instance, filepath=None):
    """
    Export a solved StableMarriageProblem instance to an Excel workbook.

    Parameters
    ----------
    instance : StableMarriageProblem
        Solved instance (its `solution` dictionary must be set).
    filepath : str, optional
        Destination. Defaults to "<export_folder>/<data_name> <solution_name>.xlsx".

    Returns
    -------
    str
        Path of the written workbook.
    """

    # Shorthand
    solution, mdl_p = instance.solution, instance.mdl_p
    if solution is None:
        raise ValueError("Error. No solution to export. Solve the instance first.")

    if filepath is None:
        folder = mdl_p['export_folder']
        if not os.path.exists(folder):
            if instance.printing:
                print("Folder '" + folder + "' not in current working directory. Creating it now...")
            os.makedirs(folder)
        filepath = os.path.join(folder, instance.data_name + ' ' + solution['name'] + '.xlsx')

    # Create a Pandas Excel writer using XlsxWriter as the engine.
    writer = pd.ExcelWriter(filepath, engine='xlsxwriter')
    workbook = writer.book

    # Main sheet: metrics table and the summary below it
    df = metrics_to_dataframe(solution['metrics'])
    df.to_excel(writer, sheet_name='Main', index=False, startrow=1, startcol=1)
    worksheet = writer.sheets['Main']
    bold_format = workbook.add_format({'bold': True, 'font_size': 14, 'font_name': 'Calibri'})
    worksheet.write('B1', 'Stable Marriage Problem: ' + instance.data_name + ' (' + solution['name'] + ')',
                    bold_format)
    worksheet.write(len(df) + 3, 1, solution['analysis']['summary'])
    worksheet.set_column(1, 1, 34)
    worksheet.set_column(2, 2, 12)

    # Remaining sheets
    matching_df = matching_to_dataframe(solution['matching'], instance.prefs_a, instance.prefs_b,
                                        solution['analysis']['blocking_pair_counts'])
    matching_df.to_excel(writer, sheet_name='Matching', index=False)
    preferences_to_dataframe(instance.prefs_a).to_excel(writer, sheet_name='Preferences A')
    preferences_to_dataframe(instance.prefs_b).to_excel(writer, sheet_name='Preferences B')
    blocking_pairs_to_dataframe(solution['blocking_pairs']).to_excel(writer, sheet_name='Blocking Pairs',
                                                                     index=False)
    suggestions_to_dataframe(solution['suggestions']).to_excel(writer, sheet_name='Suggestions', index=False)

    writer.close()
    if instance.printing:
        print("Exported solution '" + solution['name'] + "' to '" + filepath + "'.")
    return filepath
